# Application Package
from .classifier import classify, summarize
from .scheduler import format_interval, parse_rating, preview, review
from .service import MemoryService
from .session import PracticeSession, start

__all__ = [
    "review",
    "preview",
    "format_interval",
    "parse_rating",
    "classify",
    "summarize",
    "PracticeSession",
    "start",
    "MemoryService",
]
