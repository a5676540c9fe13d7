"""
In-Memory Repository: process-local adapter.

Backs demo runs and tests. Last writer wins on save.
"""

from datetime import datetime

from versemem.domain.errors import DuplicateItem, ItemNotFound
from versemem.domain.models import MemoryItem
from versemem.domain.ports import MemoryItemRepository


class InMemoryRepository(MemoryItemRepository):
    def __init__(self):
        self._items: dict[str, dict[str, MemoryItem]] = {}

    def _bucket(self, user_id: str) -> dict[str, MemoryItem]:
        return self._items.setdefault(user_id, {})

    async def list_items(self, user_id: str) -> list[MemoryItem]:
        return _ordered(self._bucket(user_id).values())

    async def due_items(self, user_id: str, now: datetime) -> list[MemoryItem]:
        return _ordered(item for item in self._bucket(user_id).values() if item.is_due(now))

    async def get(self, user_id: str, item_id: str) -> MemoryItem:
        try:
            return self._bucket(user_id)[item_id]
        except KeyError:
            raise ItemNotFound(item_id) from None

    async def add(self, user_id: str, item: MemoryItem) -> MemoryItem:
        bucket = self._bucket(user_id)
        if any(existing.reference == item.reference for existing in bucket.values()):
            raise DuplicateItem(item.reference)
        bucket[item.id] = item
        return item

    async def save(self, user_id: str, item: MemoryItem) -> MemoryItem:
        bucket = self._bucket(user_id)
        if item.id not in bucket:
            raise ItemNotFound(item.id)
        bucket[item.id] = item
        return item

    async def delete(self, user_id: str, item_id: str) -> None:
        if self._bucket(user_id).pop(item_id, None) is None:
            raise ItemNotFound(item_id)


def _ordered(items) -> list[MemoryItem]:
    # Stable sort keeps insertion order for ties without created_at
    return sorted(items, key=lambda i: (i.next_review_at, i.created_at is None, i.created_at or 0))
