"""Scraper package — page fetch, question parsing & image materialisation."""

from harvest.scraper.fetcher import download_image, fetch_page
from harvest.scraper.images import materialize_images
from harvest.scraper.models import CommunityVote, QuestionRecord, RawPage
from harvest.scraper.parser import PageParseError, parse_page

__all__ = [
    "fetch_page",
    "download_image",
    "parse_page",
    "materialize_images",
    "PageParseError",
    "RawPage",
    "QuestionRecord",
    "CommunityVote",
]
