"""Question harvester CLI — entry-point for a harvest run.

Usage:
    python cli/main.py <url1> <url2> ...
    python cli/main.py --file urls.txt

Each URL is fetched, parsed and its images downloaded, one after another,
with a courtesy delay in between.  All records are written to a single JSON
file at the end of the run.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from harvest.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import List, Optional

import typer

from harvest.config import settings
from harvest.runner import read_url_file, run_harvest, select_urls

app = typer.Typer(
    name="harvest",
    help="Scrape exam question discussion pages into results.json.",
)

_USAGE = (
    "Usage:",
    "  harvest <url1> <url2> ...",
    "  harvest --file urls.txt",
)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@app.command()
def harvest(
    urls: Optional[List[str]] = typer.Argument(None, help="Question page URLs."),
    file: Optional[Path] = typer.Option(
        None, "--file", help="Newline-delimited file of URLs (non-URL lines are ignored)."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output JSON path (default: settings.output_path)."
    ),
    images_dir: Optional[Path] = typer.Option(
        None, "--images-dir", help="Image directory (default: settings.images_dir)."
    ),
    delay: Optional[float] = typer.Option(
        None, "--delay", help="Seconds between requests (default: settings.rate_limit_delay)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Fetch each URL, extract its question data and save everything as JSON."""
    _configure_logging(verbose)

    # URLs from --file come first, followed by any given on the command line.
    targets: List[str] = []
    if file is not None:
        if not file.is_file():
            typer.echo(f"[harvest] URL file not found: {file}")
            raise typer.Exit(code=1)
        targets.extend(read_url_file(file))
    targets.extend(select_urls(urls or []))

    if not targets:
        for line in _USAGE:
            typer.echo(line)
        raise typer.Exit(code=1)

    run_harvest(
        targets,
        output_path=output,
        images_dir=images_dir,
        delay=delay,
        echo=typer.echo,
    )


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
