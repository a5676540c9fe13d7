# Infrastructure Store Adapters Package
from .memory_store import InMemoryRepository
from .sqlite_store import SqliteMemoryRepository

__all__ = ["SqliteMemoryRepository", "InMemoryRepository"]
