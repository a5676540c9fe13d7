"""
Ports (interfaces) for item storage and time.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Protocol

from .models import MemoryItem


class Clock(Protocol):
    """Source of "now". Injected so scheduling is deterministic under test."""

    def now(self) -> datetime: ...


class MemoryItemRepository(ABC):
    """
    Port for persisting memory items, keyed by (user_id, item id).

    Implementations:
        - SqliteMemoryRepository: SQLite file on disk.
        - InMemoryRepository: Process-local dict, for demos and tests.

    Concurrent saves of the same item are resolved by the adapter
    (both shipped adapters are last-writer-wins).
    """

    @abstractmethod
    async def list_items(self, user_id: str) -> list[MemoryItem]:
        """
        Fetch every item belonging to a user.

        Returns:
            Items ordered by next_review_at ascending, then created_at.
        """
        pass

    @abstractmethod
    async def due_items(self, user_id: str, now: datetime) -> list[MemoryItem]:
        """
        Fetch the items that are due at `now`.

        An item is included iff now.date() >= item.next_review_at. Items
        stay due across repeated calls until they are reviewed.

        Returns:
            Due items ordered by next_review_at ascending, then created_at.
        """
        pass

    @abstractmethod
    async def get(self, user_id: str, item_id: str) -> MemoryItem:
        """
        Fetch a single item.

        Raises:
            ItemNotFound: No such item for this user.
        """
        pass

    @abstractmethod
    async def add(self, user_id: str, item: MemoryItem) -> MemoryItem:
        """
        Store a new item.

        Raises:
            DuplicateItem: The user already has an item with this reference.
        """
        pass

    @abstractmethod
    async def save(self, user_id: str, item: MemoryItem) -> MemoryItem:
        """
        Persist an updated item.

        Raises:
            ItemNotFound: The item was deleted or never existed.
        """
        pass

    @abstractmethod
    async def delete(self, user_id: str, item_id: str) -> None:
        """
        Remove an item.

        Raises:
            ItemNotFound: No such item for this user.
        """
        pass
