# Domain Package
from .errors import (
    DuplicateItem,
    InvalidItem,
    InvalidRating,
    ItemNotFound,
    SessionComplete,
    StoreError,
    VerseMemError,
)
from .models import DashboardStats, MasteryStatus, MemoryItem, SessionStats, SessionUpdate
from .ports import Clock, MemoryItemRepository

__all__ = [
    "MemoryItem",
    "MasteryStatus",
    "SessionStats",
    "SessionUpdate",
    "DashboardStats",
    "Clock",
    "MemoryItemRepository",
    "VerseMemError",
    "InvalidRating",
    "InvalidItem",
    "SessionComplete",
    "StoreError",
    "ItemNotFound",
    "DuplicateItem",
]
