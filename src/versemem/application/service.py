"""
Memory Service: Application layer orchestrator.

Coordinates the item store, the injected clock, the scheduling engine and
practice sessions. Store errors are logged and propagated; retry policy
belongs to the caller.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from versemem.domain.constants import DEFAULT_TRANSLATION
from versemem.domain.errors import DuplicateItem, StoreError
from versemem.domain.models import DashboardStats, MemoryItem, SessionUpdate
from versemem.domain.ports import Clock, MemoryItemRepository

from .classifier import summarize
from .id_service import generate_item_id
from .importer import ImportEntry
from .queue_builder import QueueOrder, build_practice_queue
from .scheduler import IntervalPreview, preview, review, validate_quality
from .session import PracticeSession, start

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    added: list[MemoryItem] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)  # References already present


@dataclass
class Dashboard:
    items: list[MemoryItem]
    due_count: int
    stats: DashboardStats


class MemoryService:
    """
    Application service for one user's memory list.

    Follows Dependency Inversion: depends on the MemoryItemRepository and
    Clock abstractions, not concrete adapters.
    """

    def __init__(
        self,
        repo: MemoryItemRepository,
        clock: Clock,
        user_id: str,
        default_translation: str = DEFAULT_TRANSLATION,
    ):
        self._repo = repo
        self._clock = clock
        self.user_id = user_id
        self.default_translation = default_translation

    def now(self) -> datetime:
        return self._clock.now()

    async def add_item(
        self, reference: str, content: str, translation: str | None = None
    ) -> MemoryItem:
        """
        Create a new item that is due immediately.

        Raises:
            InvalidItem: Blank reference or content.
            DuplicateItem: Reference already on the user's list.
        """
        item = MemoryItem.create(
            item_id=generate_item_id(),
            reference=reference,
            content=content,
            now=self.now(),
            translation=translation or self.default_translation,
        )
        stored = await self._repo.add(self.user_id, item)
        logger.info(f"Added {stored.reference} ({stored.id}) for user {self.user_id}")
        return stored

    async def import_items(self, entries: list[ImportEntry]) -> ImportReport:
        report = ImportReport()
        for entry in entries:
            try:
                item = await self.add_item(entry.reference, entry.content, entry.translation)
            except DuplicateItem:
                report.skipped.append(entry.reference)
                continue
            report.added.append(item)
        return report

    async def list_items(self) -> list[MemoryItem]:
        return await self._repo.list_items(self.user_id)

    async def get_item(self, item_id: str) -> MemoryItem:
        return await self._repo.get(self.user_id, item_id)

    async def remove_item(self, item_id: str) -> None:
        await self._repo.delete(self.user_id, item_id)
        logger.info(f"Removed {item_id} for user {self.user_id}")

    async def due_items(self) -> list[MemoryItem]:
        return await self._repo.due_items(self.user_id, self.now())

    async def review_item(self, item_id: str, quality: int) -> MemoryItem:
        """
        Load, reschedule and persist a single item.

        Raises:
            InvalidRating: Bad quality; nothing is loaded or written.
            ItemNotFound: No such item.
        """
        quality = validate_quality(quality)
        item = await self._repo.get(self.user_id, item_id)
        updated = review(item, quality, self.now())
        await self.save_item(updated)
        return updated

    async def preview_item(self, item_id: str) -> list[IntervalPreview]:
        item = await self._repo.get(self.user_id, item_id)
        return preview(item, self.now())

    async def dashboard(self) -> Dashboard:
        items = await self._repo.list_items(self.user_id)
        stats = summarize(items, self.now())
        return Dashboard(items=items, due_count=stats.due_today, stats=stats)

    async def start_practice(
        self,
        order: QueueOrder = "due",
        max_items: int | None = None,
        seed: int | None = None,
    ) -> PracticeSession:
        """Fetch the due set, order it, and open a session over it."""
        due = await self._repo.due_items(self.user_id, self.now())
        result = build_practice_queue(due, order=order, max_items=max_items, seed=seed)
        logger.info(
            f"Practice for {self.user_id}: {len(result.queue)} items"
            f" ({len(result.deferred)} deferred)"
        )
        return start(result.queue, self._clock)

    async def submit(self, session: PracticeSession, quality: int) -> SessionUpdate:
        """
        Rate the session's current item and persist the result.

        If the store fails the session has already advanced. The rated item
        is session.reviewed[-1] and can be written again with save_item().
        """
        update = session.submit(quality)
        await self.save_item(update.item)
        return update

    async def save_item(self, item: MemoryItem) -> None:
        try:
            await self._repo.save(self.user_id, item)
        except StoreError as e:
            logger.error(f"Failed to persist {item.id}: {e}")
            raise
