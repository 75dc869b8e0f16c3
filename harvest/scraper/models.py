"""Data models for the scraper pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass
class CommunityVote:
    """One row of the community vote tally shown under a question."""

    answer: str
    count: int
    most_voted: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"answer": self.answer, "count": self.count, "most_voted": self.most_voted}


@dataclass
class QuestionRecord:
    """Structured content of one question discussion page.

    ``images`` and ``answer_images`` hold the source URLs as found in the
    markup until :func:`~harvest.scraper.images.materialize_images` replaces
    each successfully downloaded entry with its local relative path.
    """

    url: str
    topic: Optional[int] = None
    question_number: Optional[int] = None
    question: str = ""
    choices: Dict[str, str] = field(default_factory=dict)
    answer: str = ""
    community_votes: List[CommunityVote] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    answer_images: List[str] = field(default_factory=list)

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------
    def has_images(self) -> bool:
        return bool(self.images or self.answer_images)

    def most_voted(self) -> CommunityVote | None:
        """Return the first vote flagged as most voted, if any."""
        for vote in self.community_votes:
            if vote.most_voted:
                return vote
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the ``results.json`` object layout."""
        return {
            "topic": self.topic,
            "question_number": self.question_number,
            "question": self.question,
            "choices": dict(self.choices),
            "answer": self.answer,
            "community_votes": [v.to_dict() for v in self.community_votes],
            "images": list(self.images),
            "answer_images": list(self.answer_images),
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuestionRecord:
        return cls(
            url=data["url"],
            topic=data.get("topic"),
            question_number=data.get("question_number"),
            question=data.get("question", ""),
            choices=dict(data.get("choices") or {}),
            answer=data.get("answer", ""),
            community_votes=[
                CommunityVote(
                    answer=v["answer"],
                    count=v["count"],
                    most_voted=v.get("most_voted", False),
                )
                for v in data.get("community_votes") or []
            ],
            images=list(data.get("images") or []),
            answer_images=list(data.get("answer_images") or []),
        )
