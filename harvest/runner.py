"""Run orchestration: URL list → question records → ``results.json``.

``run_harvest`` drives the whole pipeline sequentially:

    for each URL: fetch → parse → materialise images → append

with a fixed courtesy delay between consecutive URLs.  A URL that fails at
any step is logged and skipped; the loop always moves on.  Results are held
in memory and written once, after the loop, as a single JSON array.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

import httpx

from harvest.config import settings
from harvest.scraper.fetcher import fetch_page
from harvest.scraper.images import materialize_images
from harvest.scraper.models import QuestionRecord
from harvest.scraper.parser import PageParseError, parse_page

logger = logging.getLogger(__name__)

Echo = Callable[[str], None]

_SUMMARY_CHARS = 80

# Per-URL failures that are logged and skipped.  Anything else propagates.
_RECOVERABLE = (httpx.HTTPError, PageParseError, OSError)


# ---------------------------------------------------------------------------
# URL input
# ---------------------------------------------------------------------------

def select_urls(candidates: Iterable[str]) -> List[str]:
    """Keep the stripped entries that look like URLs (start with ``http``)."""
    urls: List[str] = []
    for line in candidates:
        line = line.strip()
        if line and line.startswith("http"):
            urls.append(line)
    return urls


def read_url_file(path: Path) -> List[str]:
    """Read a newline-delimited URL list; blank and non-URL lines are ignored."""
    return select_urls(path.read_text(encoding="utf-8").split("\n"))


# ---------------------------------------------------------------------------
# Per-URL pipeline
# ---------------------------------------------------------------------------

def process_url(
    url: str,
    images_dir: Optional[Path] = None,
    base_dir: Optional[Path] = None,
) -> QuestionRecord:
    """Fetch, parse and materialise one question page.

    Stored image paths are relative to *base_dir* (the output file's directory).
    """
    raw = fetch_page(url)
    record = parse_page(raw.html, raw.url)
    return materialize_images(record, images_dir=images_dir, base_dir=base_dir)


def summarize(record: QuestionRecord) -> List[str]:
    """Return the progress lines printed after a page is processed."""
    lines = [
        f"  Q{record.question_number} (Topic {record.topic}): "
        f"{record.question[:_SUMMARY_CHARS]}...",
        f"  Answer: {record.answer}",
    ]
    top = record.most_voted()
    if top is not None:
        lines.append(f"  Most Voted: {top.answer} ({top.count} votes)")
    return lines


def write_results(records: Sequence[QuestionRecord], path: Path) -> None:
    """Serialise *records* as one pretty-printed UTF-8 JSON array."""
    payload = [r.to_dict() for r in records]
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def load_results(path: Path) -> List[QuestionRecord]:
    """Read a ``results.json`` file back into records."""
    data = json.loads(path.read_text(encoding="utf-8"))
    return [QuestionRecord.from_dict(item) for item in data]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def run_harvest(
    urls: Sequence[str],
    *,
    output_path: Optional[Path] = None,
    images_dir: Optional[Path] = None,
    delay: Optional[float] = None,
    echo: Echo = print,
    sleep: Callable[[float], None] = time.sleep,
) -> List[QuestionRecord]:
    """Process *urls* in order and write every successful record to *output_path*.

    Args:
        urls: Page URLs, processed strictly in the given order.
        output_path: JSON output file.  Defaults to ``settings.output_path``.
        images_dir: Image directory.  Defaults to ``settings.images_dir``.
        delay: Seconds to wait between URLs.  Defaults to
            ``settings.rate_limit_delay``.  Never applied after the last URL.
        echo: Sink for human-readable progress lines.
        sleep: Delay function (injected for tests).

    Returns:
        The records written, in input order.
    """
    output_path = output_path or settings.output_path
    delay = settings.rate_limit_delay if delay is None else delay

    total = len(urls)
    echo(f"Parsing {total} URLs...\n")
    results: List[QuestionRecord] = []

    for i, url in enumerate(urls):
        echo(f"[{i + 1}/{total}] {url}")
        try:
            record = process_url(url, images_dir=images_dir, base_dir=output_path.parent)
        except _RECOVERABLE as exc:
            logger.error("Skipping %s: %s", url, exc)
        else:
            results.append(record)
            for line in summarize(record):
                echo(line)
            echo("")

        if i < total - 1:
            sleep(delay)

    write_results(results, output_path)
    echo(f"Done! {len(results)} questions saved to {output_path}")
    return results
