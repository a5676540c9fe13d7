"""
Domain models for memory items and practice sessions.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum

from .constants import DEFAULT_TRANSLATION, INITIAL_EASE_FACTOR
from .errors import InvalidItem


@dataclass(frozen=True)
class MemoryItem:
    """
    A single passage being memorized.

    Attributes:
        id: Opaque identifier, assigned at creation and never changed.
        reference: Display label such as "John 3:16".
        content: The text to be recalled.
        translation: Bible translation the content was taken from.
        ease_factor: Interval growth multiplier, never below 1.3.
        interval: Days between the last review and the next due date.
        repetitions: Consecutive successful reviews since the last failure.
        next_review_at: Calendar date the item becomes due.
        last_reviewed_at: Time of the most recent review, None if never reviewed.
        created_at: Time the item was added.
    """

    id: str
    reference: str
    content: str
    next_review_at: date
    translation: str = DEFAULT_TRANSLATION
    ease_factor: float = INITIAL_EASE_FACTOR
    interval: int = 0
    repetitions: int = 0
    last_reviewed_at: datetime | None = None
    created_at: datetime | None = None

    @classmethod
    def create(
        cls,
        item_id: str,
        reference: str,
        content: str,
        now: datetime,
        translation: str = DEFAULT_TRANSLATION,
    ) -> "MemoryItem":
        """Build a never-reviewed item that is due immediately."""
        reference = (reference or "").strip()
        content = (content or "").strip()
        if not reference or not content:
            raise InvalidItem("Reference and text are required")

        return cls(
            id=item_id,
            reference=reference,
            content=content,
            translation=(translation or DEFAULT_TRANSLATION).strip(),
            next_review_at=now.date(),
            created_at=now,
        )

    def is_due(self, now: datetime) -> bool:
        return now.date() >= self.next_review_at

    def with_schedule(
        self,
        *,
        ease_factor: float,
        interval: int,
        repetitions: int,
        next_review_at: date,
        last_reviewed_at: datetime,
    ) -> "MemoryItem":
        """Return a copy with the scheduling fields replaced."""
        return replace(
            self,
            ease_factor=ease_factor,
            interval=interval,
            repetitions=repetitions,
            next_review_at=next_review_at,
            last_reviewed_at=last_reviewed_at,
        )


class MasteryStatus(str, Enum):
    """Coarse display bucket derived from an item's repetition count."""

    NEW = "new"
    LEARNING = "learning"
    MASTERED = "mastered"


@dataclass
class SessionStats:
    """
    Running tallies for one practice session.

    correct_count + incorrect_count <= total_presented, with equality once
    the session completes.
    """

    total_presented: int = 0
    correct_count: int = 0
    incorrect_count: int = 0

    @property
    def answered(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def remaining(self) -> int:
        return self.total_presented - self.answered

    @property
    def accuracy(self) -> int:
        """Percentage of answered items that were correct, rounded half-up."""
        if self.answered == 0:
            return 0
        return (200 * self.correct_count + self.answered) // (2 * self.answered)


@dataclass(frozen=True)
class SessionUpdate:
    """Outcome of submitting one rating."""

    item: MemoryItem
    quality: int
    correct: bool
    complete: bool


@dataclass(frozen=True)
class DashboardStats:
    """Counts shown on the memory dashboard."""

    total: int
    mastered: int
    learning: int
    new: int
    due_today: int
