from datetime import timedelta

import pytest

from versemem.application.classifier import classify, summarize
from versemem.application.scheduler import review
from versemem.domain.models import DashboardStats, MasteryStatus


@pytest.mark.parametrize(
    "reps,status",
    [
        (0, MasteryStatus.NEW),
        (1, MasteryStatus.LEARNING),
        (5, MasteryStatus.LEARNING),
        (9, MasteryStatus.LEARNING),
        (10, MasteryStatus.MASTERED),
        (250, MasteryStatus.MASTERED),
    ],
)
def test_classify_by_repetitions(make_item, reps, status):
    assert classify(make_item(repetitions=reps)) is status


def test_classify_ignores_other_fields(make_item):
    a = make_item(repetitions=4, interval=1, ease_factor=1.3)
    b = make_item(repetitions=4, interval=400, ease_factor=3.9)
    assert classify(a) is classify(b) is MasteryStatus.LEARNING


def test_classify_is_repeatable(make_item):
    item = make_item(repetitions=10)
    assert {classify(item) for _ in range(5)} == {MasteryStatus.MASTERED}


def test_lapse_returns_item_to_new(make_item, day0):
    item = make_item(repetitions=12, interval=200)
    assert classify(item) is MasteryStatus.MASTERED
    assert classify(review(item, 1, day0)) is MasteryStatus.NEW


def test_summarize_counts(make_item, day0):
    tomorrow = (day0 + timedelta(days=1)).date()
    items = [
        make_item(),  # new, due today
        make_item(repetitions=3, next_review_at=day0.date()),
        make_item(repetitions=3, next_review_at=tomorrow),
        make_item(repetitions=11, next_review_at=(day0 - timedelta(days=4)).date()),
        make_item(repetitions=15, next_review_at=tomorrow),
    ]

    stats = summarize(items, day0)

    assert stats == DashboardStats(total=5, mastered=2, learning=2, new=1, due_today=3)


def test_summarize_empty(day0):
    assert summarize([], day0) == DashboardStats(0, 0, 0, 0, 0)


def test_summarize_accepts_generators(make_item, day0):
    stats = summarize((make_item() for _ in range(3)), day0)
    assert stats.total == 3
    assert stats.new == 3
