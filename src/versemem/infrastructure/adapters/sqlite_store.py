"""
SQLite Repository: Infrastructure adapter for a local database file.

Implements MemoryItemRepository with the standard library sqlite3 driver.
Saves are last-writer-wins.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path

from versemem.domain.errors import DuplicateItem, ItemNotFound, StoreError
from versemem.domain.models import MemoryItem
from versemem.domain.ports import MemoryItemRepository

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS memory_items (
    user_id TEXT NOT NULL,
    id TEXT NOT NULL,
    reference TEXT NOT NULL,
    content TEXT NOT NULL,
    translation TEXT NOT NULL DEFAULT 'NIV',
    ease_factor REAL NOT NULL DEFAULT 2.5,
    interval INTEGER NOT NULL DEFAULT 0,
    repetitions INTEGER NOT NULL DEFAULT 0,
    next_review_at TEXT NOT NULL,
    last_reviewed_at TEXT,
    created_at TEXT,
    PRIMARY KEY (user_id, id),
    UNIQUE (user_id, reference)
);
CREATE INDEX IF NOT EXISTS idx_memory_items_due ON memory_items(user_id, next_review_at);
"""

_COLUMNS = (
    "id, reference, content, translation, ease_factor, interval, repetitions, "
    "next_review_at, last_reviewed_at, created_at"
)


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open (creating if needed) the database and apply the schema."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    # Async handlers may run on a worker thread other than the opener.
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.executescript(SCHEMA_SQL)
    conn.commit()
    return conn


class SqliteMemoryRepository(MemoryItemRepository):
    """
    Stores memory items in a single SQLite table keyed by (user_id, id).
    """

    def __init__(self, db_path: Path | str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                self._conn = connect(self.db_path)
            except sqlite3.Error as e:
                raise StoreError(f"Could not open database {self.db_path}: {e}") from e
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @contextmanager
    def _guard(self, action: str) -> Iterator[sqlite3.Connection]:
        conn = self.conn
        try:
            yield conn
        except sqlite3.Error as e:
            conn.rollback()
            logger.warning(f"SQLite {action} failed: {e}")
            raise StoreError(f"Failed to {action}: {e}") from e

    async def list_items(self, user_id: str) -> list[MemoryItem]:
        with self._guard("list items") as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM memory_items
                WHERE user_id = ?
                ORDER BY next_review_at ASC, created_at ASC
                """,
                (user_id,),
            ).fetchall()
        return [_row_to_item(row) for row in rows]

    async def due_items(self, user_id: str, now: datetime) -> list[MemoryItem]:
        with self._guard("fetch due items") as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM memory_items
                WHERE user_id = ? AND next_review_at <= ?
                ORDER BY next_review_at ASC, created_at ASC
                """,
                (user_id, now.date().isoformat()),
            ).fetchall()
        return [_row_to_item(row) for row in rows]

    async def get(self, user_id: str, item_id: str) -> MemoryItem:
        with self._guard("fetch item") as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM memory_items WHERE user_id = ? AND id = ?",
                (user_id, item_id),
            ).fetchone()
        if row is None:
            raise ItemNotFound(item_id)
        return _row_to_item(row)

    async def add(self, user_id: str, item: MemoryItem) -> MemoryItem:
        try:
            with self._guard("add item") as conn:
                conn.execute(
                    f"INSERT INTO memory_items (user_id, {_COLUMNS}) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (user_id, *_item_to_row(item)),
                )
                conn.commit()
        except StoreError as e:
            if isinstance(e.__cause__, sqlite3.IntegrityError):
                raise DuplicateItem(item.reference) from e.__cause__
            raise
        return item

    async def save(self, user_id: str, item: MemoryItem) -> MemoryItem:
        with self._guard("save item") as conn:
            cursor = conn.execute(
                """
                UPDATE memory_items
                SET ease_factor = ?, interval = ?, repetitions = ?,
                    next_review_at = ?, last_reviewed_at = ?
                WHERE user_id = ? AND id = ?
                """,
                (
                    item.ease_factor,
                    item.interval,
                    item.repetitions,
                    item.next_review_at.isoformat(),
                    _iso(item.last_reviewed_at),
                    user_id,
                    item.id,
                ),
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise ItemNotFound(item.id)
        return item

    async def delete(self, user_id: str, item_id: str) -> None:
        with self._guard("delete item") as conn:
            cursor = conn.execute(
                "DELETE FROM memory_items WHERE user_id = ? AND id = ?",
                (user_id, item_id),
            )
            conn.commit()
        if cursor.rowcount == 0:
            raise ItemNotFound(item_id)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _item_to_row(item: MemoryItem) -> tuple:
    return (
        item.id,
        item.reference,
        item.content,
        item.translation,
        item.ease_factor,
        item.interval,
        item.repetitions,
        item.next_review_at.isoformat(),
        _iso(item.last_reviewed_at),
        _iso(item.created_at),
    )


def _row_to_item(row: sqlite3.Row) -> MemoryItem:
    return MemoryItem(
        id=row["id"],
        reference=row["reference"],
        content=row["content"],
        translation=row["translation"],
        ease_factor=row["ease_factor"],
        interval=row["interval"],
        repetitions=row["repetitions"],
        next_review_at=date.fromisoformat(row["next_review_at"]),
        last_reviewed_at=_parse_dt(row["last_reviewed_at"]),
        created_at=_parse_dt(row["created_at"]),
    )


def _parse_dt(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
