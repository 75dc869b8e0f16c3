"""HTTP fetchers for discussion pages and the images embedded in them."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from harvest.config import settings
from harvest.scraper.models import RawPage

logger = logging.getLogger(__name__)

_PAGE_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def _page_headers() -> dict[str, str]:
    return {
        "User-Agent": settings.user_agent,
        "Accept": _PAGE_ACCEPT,
        "Accept-Language": settings.accept_language,
    }


def _image_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def fetch_page(url: str) -> RawPage:
    """Fetch *url* with a browser-like header set and return a :class:`RawPage`.

    No delay is applied here; pacing between pages is the orchestrator's job.

    Raises:
        httpx.HTTPStatusError: If the server returns a 4xx/5xx status code.
        httpx.HTTPError: On transport failures (DNS, connect, timeout, ...).
    """
    logger.debug("GET %s", url)
    with httpx.Client(
        headers=_page_headers(),
        timeout=settings.request_timeout,
        follow_redirects=True,
    ) as client:
        response = client.get(url)
        response.raise_for_status()
        return RawPage(url=url, html=response.text, status_code=response.status_code)


def download_image(url: str, dest: Path) -> bool:
    """Download the binary resource at *url* into *dest*.

    Failures are not fatal: a warning is logged and ``False`` is returned so
    the caller can keep the original URL.  *dest* is only written on success.
    """
    logger.debug("GET %s -> %s", url, dest)
    try:
        with httpx.Client(
            headers=_image_headers(),
            timeout=settings.request_timeout,
            follow_redirects=True,
        ) as client:
            response = client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("Failed to download image: %s (%s)", url, exc)
        return False

    if not response.is_success:
        logger.warning("Failed to download image: %s (HTTP %s)", url, response.status_code)
        return False

    dest.write_bytes(response.content)
    return True
