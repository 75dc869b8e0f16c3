"""Image materialisation: download a record's images and point it at the local copies.

Filenames are deterministic: ``q<question_number>_<i><ext>`` for question
images and ``q<question_number>_answer_<i><ext>`` for answer images, so a
rerun over the same URLs overwrites the same files.

When a question image cannot be downloaded, its slot keeps the (origin
resolved) URL and the ``[image_<i>]`` placeholder stays in the question text.
Consumers should read a literal placeholder as "image unavailable".
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Callable, List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from harvest.config import settings
from harvest.scraper.fetcher import download_image
from harvest.scraper.models import QuestionRecord

logger = logging.getLogger(__name__)

Downloader = Callable[[str, Path], bool]

_DEFAULT_EXT = ".png"


def resolve_image_url(src: str, origin: Optional[str] = None) -> str:
    """Resolve a site-relative ``src`` (leading ``/``) against the site origin."""
    if src.startswith("/"):
        return urljoin(origin or settings.site_origin, src)
    return src


def image_extension(url: str) -> str:
    """Return the file extension of the URL path, defaulting to ``.png``."""
    return PurePosixPath(urlparse(url).path).suffix or _DEFAULT_EXT


def placeholder(index: int) -> str:
    return f"[image_{index}]"


def inline_marker(relative_path: str) -> str:
    return f"[image: {relative_path}]"


def _download_all(
    sources: List[str],
    stem: str,
    images_dir: Path,
    base_dir: Optional[Path],
    origin: Optional[str],
    downloader: Downloader,
) -> List[Tuple[str, bool]]:
    """Download each source; return ``(value, saved)`` per index.

    ``value`` is the local path relative to *base_dir* when ``saved``, else the
    resolved URL (or the raw ``src`` when it cannot be parsed as a URL).
    """
    results: List[Tuple[str, bool]] = []
    for i, src in enumerate(sources):
        try:
            url = resolve_image_url(src, origin)
            filename = f"{stem}_{i}{image_extension(url)}"
        except ValueError as exc:
            logger.warning("Failed to download image: %s (%s)", src, exc)
            results.append((src, False))
            continue

        dest = images_dir / filename
        if downloader(url, dest):
            relative_path = Path(os.path.relpath(dest, base_dir or os.curdir)).as_posix()
            results.append((relative_path, True))
        else:
            results.append((url, False))
    return results


def materialize_images(
    record: QuestionRecord,
    images_dir: Optional[Path] = None,
    origin: Optional[str] = None,
    downloader: Downloader = download_image,
    base_dir: Optional[Path] = None,
) -> QuestionRecord:
    """Download every image referenced by *record* into *images_dir*.

    The record is mutated in place and returned.  Records without images are
    returned untouched and no directory is created.

    Args:
        record: A freshly parsed record; ``question_number`` must already be set.
        images_dir: Target directory.  Defaults to ``settings.images_dir``.
        origin: Site origin for relative URLs.  Defaults to ``settings.site_origin``.
        downloader: ``(url, dest) -> bool`` callable performing the download.
        base_dir: Directory the stored local paths are relative to, normally
            the one holding ``results.json``.  Defaults to the working directory.
    """
    if not record.has_images():
        return record

    images_dir = settings.ensure_images_dir(images_dir)
    number = record.question_number if record.question_number is not None else "unknown"

    # Question images: slot i and placeholder [image_i] always refer to the same image.
    question_saved = _download_all(
        record.images, f"q{number}", images_dir, base_dir, origin, downloader
    )
    for i, (value, saved) in enumerate(question_saved):
        if saved:
            record.question = record.question.replace(placeholder(i), inline_marker(value), 1)
    record.images = [value for value, _ in question_saved]

    # Answer images are not referenced from any text.
    answer_saved = _download_all(
        record.answer_images, f"q{number}_answer", images_dir, base_dir, origin, downloader
    )
    record.answer_images = [value for value, _ in answer_saved]

    logger.debug(
        "Q%s: %d/%d question images, %d/%d answer images saved",
        number,
        sum(1 for _, saved in question_saved if saved),
        len(question_saved),
        sum(1 for _, saved in answer_saved if saved),
        len(answer_saved),
    )
    return record
