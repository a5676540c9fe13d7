from dataclasses import replace
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from versemem.application.importer import ImportEntry
from versemem.application.service import MemoryService
from versemem.domain.errors import (
    DuplicateItem,
    InvalidItem,
    InvalidRating,
    ItemNotFound,
    SessionComplete,
    StoreError,
)


@pytest.fixture
def service(memory_repo, clock):
    return MemoryService(repo=memory_repo, clock=clock, user_id="pastor-1")


@pytest.mark.asyncio
async def test_add_item_defaults(service, day0):
    item = await service.add_item("John 3:16", "For God so loved the world...")

    assert item.id.startswith("verse_")
    assert item.translation == "NIV"
    assert item.ease_factor == 2.5
    assert item.interval == 0
    assert item.repetitions == 0
    assert item.next_review_at == day0.date()
    assert item.last_reviewed_at is None
    assert item.created_at == day0


@pytest.mark.asyncio
async def test_add_item_uses_default_translation(memory_repo, clock):
    service = MemoryService(memory_repo, clock, "u", default_translation="ESV")
    item = await service.add_item("Psalm 23:1", "The LORD is my shepherd")
    assert item.translation == "ESV"


@pytest.mark.asyncio
async def test_add_item_validation(service):
    with pytest.raises(InvalidItem):
        await service.add_item("  ", "text")
    with pytest.raises(InvalidItem):
        await service.add_item("John 1:1", "")


@pytest.mark.asyncio
async def test_duplicate_reference_rejected(service):
    await service.add_item("John 3:16", "text")
    with pytest.raises(DuplicateItem):
        await service.add_item("John 3:16", "other text")


@pytest.mark.asyncio
async def test_users_are_isolated(memory_repo, clock):
    alice = MemoryService(memory_repo, clock, "alice")
    bob = MemoryService(memory_repo, clock, "bob")

    item = await alice.add_item("John 3:16", "text")
    await bob.add_item("John 3:16", "text")

    assert len(await alice.list_items()) == 1
    with pytest.raises(ItemNotFound):
        await bob.get_item(item.id)


@pytest.mark.asyncio
async def test_review_item_persists(service, clock, day0):
    item = await service.add_item("John 3:16", "text")

    updated = await service.review_item(item.id, 4)

    stored = await service.get_item(item.id)
    assert stored == updated
    assert stored.repetitions == 1
    assert stored.next_review_at == (day0 + timedelta(days=1)).date()


@pytest.mark.asyncio
async def test_review_item_invalid_rating_writes_nothing(service):
    item = await service.add_item("John 3:16", "text")
    with pytest.raises(InvalidRating):
        await service.review_item(item.id, 9)
    assert (await service.get_item(item.id)) == item


@pytest.mark.asyncio
async def test_review_missing_item(service):
    with pytest.raises(ItemNotFound):
        await service.review_item("verse_nope", 4)


@pytest.mark.asyncio
async def test_review_rating_checked_before_lookup(clock):
    repo = AsyncMock()
    service = MemoryService(repo, clock, "u")
    with pytest.raises(InvalidRating):
        await service.review_item("verse_nope", 9)
    repo.get.assert_not_awaited()
    repo.save.assert_not_awaited()


@pytest.mark.asyncio
async def test_dashboard(service, clock):
    a = await service.add_item("John 3:16", "text")
    await service.add_item("Romans 8:28", "text")
    await service.review_item(a.id, 5)

    dashboard = await service.dashboard()

    assert dashboard.stats.total == 2
    assert dashboard.stats.new == 1
    assert dashboard.stats.learning == 1
    assert dashboard.due_count == 1

    clock.advance(days=1)
    assert (await service.dashboard()).due_count == 2


@pytest.mark.asyncio
async def test_practice_round_trip(service, clock):
    for ref in ("John 3:16", "Romans 8:28", "Psalm 23:1"):
        await service.add_item(ref, "text")

    session = await service.start_practice()
    assert len(session) == 3

    for quality in (5, 2, 4):
        await service.submit(session, quality)

    summary = session.summary()
    assert (summary.total_presented, summary.correct_count, summary.incorrect_count) == (3, 2, 1)
    assert summary.accuracy == 67

    # Everything was persisted and nothing is due again today
    assert await service.due_items() == []
    items = {i.reference: i for i in await service.list_items()}
    assert items["Romans 8:28"].repetitions == 0
    assert items["John 3:16"].repetitions == 1

    with pytest.raises(SessionComplete):
        await service.submit(session, 4)


@pytest.mark.asyncio
async def test_practice_respects_limit_and_order(service):
    a = await service.add_item("A", "text")
    await service.add_item("B", "text")
    await service.save_item(replace(a, ease_factor=1.3))

    session = await service.start_practice(order="hardest", max_items=1)

    assert len(session) == 1
    assert session.current_item().reference == "A"


@pytest.mark.asyncio
async def test_practice_with_nothing_due(service):
    session = await service.start_practice()
    assert session.complete
    assert session.summary().total_presented == 0


@pytest.mark.asyncio
async def test_store_failure_propagates(clock, make_item):
    repo = AsyncMock()
    item = make_item()
    repo.due_items.return_value = [item]
    repo.save.side_effect = StoreError("disk full")
    service = MemoryService(repo, clock, "u")

    session = await service.start_practice()
    with pytest.raises(StoreError):
        await service.submit(session, 4)

    # The rating was applied; the caller can retry the write
    assert session.reviewed[-1].repetitions == 1
    repo.save.side_effect = None
    await service.save_item(session.reviewed[-1])
    assert repo.save.await_count == 2
    repo.due_items.assert_awaited_once_with("u", clock.now())


@pytest.mark.asyncio
async def test_import_items_skips_duplicates(service):
    await service.add_item("John 3:16", "text")
    entries = [
        ImportEntry("John 3:16", "text"),
        ImportEntry("Psalm 23:1", "The LORD is my shepherd", "KJV"),
    ]

    report = await service.import_items(entries)

    assert [i.reference for i in report.added] == ["Psalm 23:1"]
    assert report.added[0].translation == "KJV"
    assert report.skipped == ["John 3:16"]


@pytest.mark.asyncio
async def test_remove_item(service):
    item = await service.add_item("John 3:16", "text")
    await service.remove_item(item.id)
    assert await service.list_items() == []
    with pytest.raises(ItemNotFound):
        await service.remove_item(item.id)


@pytest.mark.asyncio
async def test_preview_item(service):
    item = await service.add_item("John 3:16", "text")
    previews = await service.preview_item(item.id)
    assert {p.rating: p.label for p in previews} == {
        "again": "1 day",
        "hard": "1 day",
        "good": "1 day",
        "easy": "1 day",
    }
