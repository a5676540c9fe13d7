"""
SM-2 scheduling engine.

This is a pure computation module with no I/O: the caller supplies "now"
and is responsible for persisting the returned item.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from versemem.domain.constants import (
    FIRST_INTERVAL_DAYS,
    LAPSE_INTERVAL_DAYS,
    MAX_INTERVAL_DAYS,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    MIN_QUALITY,
    PASSING_QUALITY,
    RATING_NAMES,
    SECOND_INTERVAL_DAYS,
)
from versemem.domain.errors import InvalidRating
from versemem.domain.models import MemoryItem

_MIN_EASE = Decimal(str(MIN_EASE_FACTOR))


def validate_quality(quality: object) -> int:
    """
    Return `quality` unchanged if it is an integer rating 0-5.

    Raises:
        InvalidRating: Anything else, including bools and floats.
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidRating(quality)
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidRating(quality)
    return quality


def is_correct(quality: int) -> bool:
    return quality >= PASSING_QUALITY


def ease_delta(quality: int) -> Decimal:
    """
    SM-2 ease adjustment: 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02).

    Evaluated in whole hundredths so the result is exact.
    """
    d = MAX_QUALITY - quality
    return Decimal(10 - d * (8 + 2 * d)) / 100


def next_ease_factor(ease_factor: float, quality: int) -> float:
    new_ease = Decimal(str(ease_factor)) + ease_delta(quality)
    if new_ease < _MIN_EASE:
        new_ease = _MIN_EASE
    return float(new_ease)


def grow_interval(interval: int, ease_factor: float) -> int:
    """round(interval * ease_factor), rounding halves up."""
    product = Decimal(interval) * Decimal(str(ease_factor))
    return int(product.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def review(item: MemoryItem, quality: int, now: datetime) -> MemoryItem:
    """
    Apply one review to `item` and return the rescheduled copy.

    Args:
        item: Current learning state.
        quality: Recall quality 0-5; 3 and above counts as correct.
        now: Review time. The next due date is now's calendar date plus the
            new interval, independent of time of day. Intervals are capped at
            MAX_INTERVAL_DAYS.

    Returns:
        A new MemoryItem; id, reference, content and translation are untouched.

    Raises:
        InvalidRating: quality is not an integer in [0, 5]. Nothing is computed.
    """
    quality = validate_quality(quality)

    if is_correct(quality):
        if item.repetitions == 0:
            interval = FIRST_INTERVAL_DAYS
        elif item.repetitions == 1:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = min(grow_interval(item.interval, item.ease_factor), MAX_INTERVAL_DAYS)
        repetitions = item.repetitions + 1
    else:
        # Failed recall - retry tomorrow regardless of prior interval
        repetitions = 0
        interval = LAPSE_INTERVAL_DAYS

    return item.with_schedule(
        ease_factor=next_ease_factor(item.ease_factor, quality),
        interval=interval,
        repetitions=repetitions,
        next_review_at=now.date() + timedelta(days=interval),
        last_reviewed_at=now,
    )


@dataclass(frozen=True)
class IntervalPreview:
    """What a rating would do to an item, without applying it."""

    rating: str
    quality: int
    interval: int
    label: str


def preview(item: MemoryItem, now: datetime) -> list[IntervalPreview]:
    """
    Evaluate every named rating against `item`.

    Used by practice views to show the next interval on each button.
    """
    previews = []
    for name, quality in RATING_NAMES.items():
        outcome = review(item, quality, now)
        previews.append(
            IntervalPreview(
                rating=name,
                quality=quality,
                interval=outcome.interval,
                label=format_interval(outcome.interval),
            )
        )
    return previews


def format_interval(days: int) -> str:
    """Human-readable interval: "1 day", "12 days", "3 months", "2 years"."""
    if days == 1:
        return "1 day"
    if days < 30:
        return f"{days} days"
    if days < 365:
        return f"{_round_half_up(days / 30)} months"
    return f"{_round_half_up(days / 365)} years"


def parse_rating(value: object) -> int:
    """
    Accept an int 0-5, a digit string, or a rating name (again/hard/good/easy).

    Raises:
        InvalidRating: Unrecognized value.
    """
    if isinstance(value, str):
        text = value.strip().lower()
        if text in RATING_NAMES:
            return RATING_NAMES[text]
        if text.isdigit():
            return validate_quality(int(text))
        raise InvalidRating(value)
    return validate_quality(value)


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
