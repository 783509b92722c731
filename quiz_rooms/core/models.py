"""Domain models for the quiz room application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(slots=True)
class Room:
    """A quiz container with an access password, an owner and a timer duration."""

    id: str
    subject: str
    owner_name: str
    password: str
    quiz_duration: int  # seconds

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, object]) -> "Room":
        return cls(
            id=doc_id,
            subject=str(data.get("roomSubject", "")),
            owner_name=str(data.get("ownerName", "")),
            password=str(data.get("password", "")),
            quiz_duration=_as_int(data.get("quizDuration")),
        )

    def to_document(self) -> dict[str, object]:
        return {
            "roomSubject": self.subject,
            "ownerName": self.owner_name,
            "password": self.password,
            "quizDuration": self.quiz_duration,
        }


@dataclass(slots=True)
class RoomSummary:
    """Public view of a room; never carries the password."""

    id: str
    subject: str
    owner_name: str
    quiz_duration: int


@dataclass(slots=True)
class Question:
    """Multiple-choice question; ``correct_option`` is a 1-based index stored as text."""

    id: str
    question_text: str
    options: list[str]
    correct_option: str = ""

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, object]) -> "Question":
        raw_options = data.get("options") or []
        correct = data.get("correctOption")
        return cls(
            id=doc_id,
            question_text=str(data.get("question", "")),
            options=[str(option) for option in raw_options],
            correct_option="" if correct is None else str(correct),
        )

    def to_document(self) -> dict[str, object]:
        return {
            "question": self.question_text,
            "options": list(self.options),
            "correctOption": self.correct_option,
        }


@dataclass(slots=True)
class Participant:
    """One user's membership and score within a room."""

    id: str
    uid: str
    name: str
    score: int = 0
    submitted_at: datetime | None = None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, object]) -> "Participant":
        return cls(
            id=doc_id,
            uid=str(data.get("uid", "")),
            name=str(data.get("name", "")),
            score=_as_int(data.get("score")),
            submitted_at=_as_datetime(data.get("submittedAt")),
        )


@dataclass(slots=True)
class QuizResult:
    """Outcome of a submitted attempt."""

    correct: int
    incorrect: int

    @property
    def total(self) -> int:
        return self.correct + self.incorrect

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total * 100

    def format_percentage(self) -> str:
        return f"{self.percentage:.2f}%"


@dataclass(slots=True)
class ReviewRow:
    """One line of the post-submission review."""

    question_text: str
    your_answer: str
    correct_answer: str


@dataclass(slots=True)
class Identity:
    """Authenticated user as supplied by the identity provider."""

    uid: str
    display_name: str | None = None
    signed_in_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# Stored documents carry no schema; unreadable values fall back to defaults.


def _as_int(value: object) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def _as_datetime(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None
