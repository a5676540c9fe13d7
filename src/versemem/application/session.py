"""
Practice session orchestrator.

Sequences a caller-supplied list of due items, applies the scheduling
engine to each submitted rating, and keeps running statistics. Sessions
are transient in-memory values owned by a single caller; they do no I/O
and hold no locks.
"""

import logging
from collections.abc import Iterable

from versemem.domain.errors import SessionComplete
from versemem.domain.models import MemoryItem, SessionStats, SessionUpdate
from versemem.domain.ports import Clock

from .scheduler import is_correct, review, validate_quality

logger = logging.getLogger(__name__)


class PracticeSession:
    """
    One run through a due sequence.

    Items are presented in exactly the order given; reordering is a policy
    decision for whoever builds the sequence (see queue_builder).
    """

    def __init__(self, items: Iterable[MemoryItem], clock: Clock):
        self._items: tuple[MemoryItem, ...] = tuple(items)
        self._clock = clock
        self._position = 0
        self._stats = SessionStats(total_presented=len(self._items))
        self._reviewed: list[MemoryItem] = []

    @property
    def complete(self) -> bool:
        return self._position >= len(self._items)

    @property
    def position(self) -> int:
        return self._position

    @property
    def reviewed(self) -> list[MemoryItem]:
        """Updated items, in the order they were answered."""
        return list(self._reviewed)

    def __len__(self) -> int:
        return len(self._items)

    def current_item(self) -> MemoryItem | None:
        """The item awaiting a rating, or None once the session is complete."""
        if self.complete:
            return None
        return self._items[self._position]

    def submit(self, quality: int) -> SessionUpdate:
        """
        Rate the current item and advance.

        Raises:
            SessionComplete: No item is awaiting a rating.
            InvalidRating: quality out of range; the session is left untouched
                so the caller can retry.
        """
        item = self.current_item()
        if item is None:
            raise SessionComplete()

        quality = validate_quality(quality)
        updated = review(item, quality, self._clock.now())
        correct = is_correct(quality)

        if correct:
            self._stats.correct_count += 1
        else:
            self._stats.incorrect_count += 1
        self._reviewed.append(updated)
        self._position += 1

        logger.debug(
            f"Reviewed {item.id} q={quality}: interval {item.interval} -> {updated.interval}"
        )
        return SessionUpdate(item=updated, quality=quality, correct=correct, complete=self.complete)

    def summary(self) -> SessionStats:
        """Snapshot of the session statistics so far."""
        return SessionStats(
            total_presented=self._stats.total_presented,
            correct_count=self._stats.correct_count,
            incorrect_count=self._stats.incorrect_count,
        )


def start(items: Iterable[MemoryItem], clock: Clock) -> PracticeSession:
    """Begin a session over an already-ordered due sequence. Empty input is allowed."""
    return PracticeSession(items, clock)
