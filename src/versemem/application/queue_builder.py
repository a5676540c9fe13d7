"""
Due-sequence builder for practice sessions.

The session orchestrator never reorders; ordering and capping the due set
happens here, before start().
"""

import logging
import random
from dataclasses import dataclass
from typing import Literal

from versemem.domain.models import MemoryItem

logger = logging.getLogger(__name__)

QueueOrder = Literal["due", "hardest", "shuffle"]


@dataclass
class QueueBuildResult:
    """Result of queue building operation."""

    queue: list[MemoryItem]  # Items to present, in order
    deferred: list[MemoryItem]  # Due items left out by the size cap


def build_practice_queue(
    due: list[MemoryItem],
    order: QueueOrder = "due",
    max_items: int | None = None,
    seed: int | None = None,
) -> QueueBuildResult:
    """
    Order and cap a due set for one session.

    Args:
        due: Items already filtered to "due" by the store.
        order: 'due' keeps the earliest-due-first order the store returns.
            'hardest' puts the lowest ease factor first (fewest repetitions
            breaks ties). 'shuffle' randomizes, reproducibly when `seed` is set.
        max_items: Session size cap; None or 0 means unlimited. Negative
            values raise ValueError.
        seed: Random seed for 'shuffle'.

    Returns:
        QueueBuildResult with the ordered queue and any deferred items.
    """
    if max_items is not None and max_items < 0:
        raise ValueError(f"max_items must be >= 0, got {max_items}")

    if order == "due":
        ordered = list(due)
    elif order == "hardest":
        ordered = sorted(due, key=lambda item: (item.ease_factor, item.repetitions))
    elif order == "shuffle":
        ordered = list(due)
        random.Random(seed).shuffle(ordered)
    else:
        raise ValueError(f"Unknown queue order: {order!r}")

    if max_items and len(ordered) > max_items:
        logger.info(f"Capping session at {max_items} of {len(ordered)} due items")
        return QueueBuildResult(queue=ordered[:max_items], deferred=ordered[max_items:])

    return QueueBuildResult(queue=ordered, deferred=[])
