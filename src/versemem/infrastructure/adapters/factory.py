"""
Store Factory
Centralizes the logic for selecting the item store and clock.
"""

from versemem.application.config import AppConfig
from versemem.application.service import MemoryService
from versemem.domain.ports import MemoryItemRepository
from versemem.infrastructure.adapters.memory_store import InMemoryRepository
from versemem.infrastructure.adapters.sqlite_store import SqliteMemoryRepository
from versemem.infrastructure.clock import SystemClock


def get_repository(config: AppConfig) -> MemoryItemRepository:
    """
    Returns the MemoryItemRepository implementation selected by config.
    """
    if config.backend == "memory":
        return InMemoryRepository()
    return SqliteMemoryRepository(config.db_path)


def get_memory_service(
    config: AppConfig,
    repo: MemoryItemRepository | None = None,
    user_id: str | None = None,
) -> MemoryService:
    """Wire a MemoryService for one user from config."""
    return MemoryService(
        repo=repo or get_repository(config),
        clock=SystemClock(config.timezone),
        user_id=user_id or config.user_id,
        default_translation=config.default_translation,
    )
