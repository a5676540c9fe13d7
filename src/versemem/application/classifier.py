"""
Mastery classification for dashboards.

Stateless and side-effect free.
"""

from collections.abc import Iterable
from datetime import datetime

from versemem.domain.constants import MASTERY_REPETITIONS
from versemem.domain.models import DashboardStats, MasteryStatus, MemoryItem


def classify(item: MemoryItem) -> MasteryStatus:
    """Bucket an item by its consecutive-success count alone."""
    if item.repetitions <= 0:
        return MasteryStatus.NEW
    if item.repetitions < MASTERY_REPETITIONS:
        return MasteryStatus.LEARNING
    return MasteryStatus.MASTERED


def summarize(items: Iterable[MemoryItem], now: datetime) -> DashboardStats:
    """
    Count items per status plus how many are due at `now`.
    """
    counts = {status: 0 for status in MasteryStatus}
    total = 0
    due_today = 0

    for item in items:
        total += 1
        counts[classify(item)] += 1
        if item.is_due(now):
            due_today += 1

    return DashboardStats(
        total=total,
        mastered=counts[MasteryStatus.MASTERED],
        learning=counts[MasteryStatus.LEARNING],
        new=counts[MasteryStatus.NEW],
        due_today=due_today,
    )
