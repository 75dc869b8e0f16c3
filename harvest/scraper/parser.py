"""Question page parsing: turns raw discussion-page markup into a :class:`QuestionRecord`.

The parser is pure and performs no I/O.  Every field it looks for is
optional; a page that lacks a header, choices, an answer or a vote tally
still yields a record with those fields left empty.  Only markup that cannot
be loaded at all raises :class:`PageParseError`.
"""

from __future__ import annotations

import copy
import json
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from harvest.scraper.models import CommunityVote, QuestionRecord

_QUESTION_RE = re.compile(r"Question\s*#:\s*(\d+)")
_TOPIC_RE = re.compile(r"Topic\s*#:\s*(\d+)")

_HEADER_SELECTOR = "div.question-discussion-header"
_BODY_SELECTOR = "div.question-body"
_CONTENT_SELECTOR = "p.card-text"
_CHOICE_SELECTOR = "li.multi-choice-item"
_CHOICE_LETTER_SELECTOR = "span.multi-choice-letter"
_ANSWER_SELECTOR = "span.correct-answer"
_VOTES_SELECTOR = "div.voted-answers-tally script"


class PageParseError(ValueError):
    """Raised when page markup cannot be loaded into a document tree."""


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _load(html: str) -> BeautifulSoup:
    if not html or not html.strip():
        raise PageParseError("empty document")
    try:
        return BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise PageParseError(str(exc)) from exc


def _match_int(pattern: re.Pattern[str], text: str) -> Optional[int]:
    match = pattern.search(text)
    return int(match.group(1)) if match else None


def _parse_header(soup: BeautifulSoup) -> Tuple[Optional[int], Optional[int]]:
    """Return ``(question_number, topic)`` from the discussion header."""
    header = soup.select_one(_HEADER_SELECTOR)
    if header is None:
        return None, None
    text = header.get_text()
    return _match_int(_QUESTION_RE, text), _match_int(_TOPIC_RE, text)


def _question_text(content: Tag | None) -> Tuple[str, List[str]]:
    """Flatten the question content and collect its image sources.

    Line breaks become ``\\n``.  Each image with a ``src`` is replaced by
    ``[image_<i>]`` where ``i`` is its position in the returned list, so two
    images sharing a URL still get distinct placeholders.
    """
    if content is None:
        return "", []

    fragment = BeautifulSoup(content.decode_contents(), "html.parser")
    for br in fragment.find_all("br"):
        br.replace_with("\n")

    images: List[str] = []
    for img in fragment.find_all("img"):
        src = img.get("src")
        if not src:
            continue
        img.replace_with(f"[image_{len(images)}]")
        images.append(src)

    return fragment.get_text().strip(), images


def _parse_choices(body: Tag) -> dict[str, str]:
    choices: dict[str, str] = {}
    for item in body.select(_CHOICE_SELECTOR):
        label = item.select_one(_CHOICE_LETTER_SELECTOR)
        letter = label.get("data-choice-letter") if label is not None else None
        if not letter:
            continue
        # Drop the letter label so only the choice body remains.
        clone = copy.copy(item)
        for span in clone.select(_CHOICE_LETTER_SELECTOR):
            span.decompose()
        choices[letter] = clone.get_text().strip()
    return choices


def _image_sources(element: Tag | None) -> List[str]:
    if element is None:
        return []
    return [img["src"] for img in element.find_all("img") if img.get("src")]


def _parse_votes(body: Tag) -> List[CommunityVote]:
    """Decode the embedded vote tally; anything unexpected yields ``[]``."""
    script = body.select_one(_VOTES_SELECTOR)
    if script is None:
        return []
    payload = (script.string or "").strip()
    if not payload:
        return []

    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        return []
    if not isinstance(data, list) or not all(isinstance(v, dict) for v in data):
        return []

    try:
        return [
            CommunityVote(
                answer=str(v.get("voted_answers", "")),
                count=int(v.get("vote_count") or 0),
                most_voted=bool(v.get("is_most_voted", False)),
            )
            for v in data
        ]
    except (TypeError, ValueError):
        return []


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_page(html: str, url: str) -> QuestionRecord:
    """Extract a :class:`QuestionRecord` from a discussion page.

    Args:
        html: Raw page markup.
        url: The URL the markup was fetched from, kept on the record.

    Returns:
        A record whose ``images`` / ``answer_images`` still hold source URLs.

    Raises:
        PageParseError: If *html* is empty or rejected by the HTML parser.
    """
    soup = _load(html)
    question_number, topic = _parse_header(soup)

    record = QuestionRecord(url=url, topic=topic, question_number=question_number)

    body = soup.select_one(_BODY_SELECTOR)
    if body is None:
        return record

    record.question, record.images = _question_text(body.select_one(_CONTENT_SELECTOR))
    record.choices = _parse_choices(body)

    answer = body.select_one(_ANSWER_SELECTOR)
    if answer is not None:
        record.answer = answer.get_text().strip()
        record.answer_images = _image_sources(answer)

    record.community_votes = _parse_votes(body)
    return record
