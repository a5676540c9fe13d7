from dataclasses import replace
from datetime import datetime, timezone

import pytest

from versemem.domain.models import MemoryItem
from versemem.infrastructure.adapters.memory_store import InMemoryRepository
from versemem.infrastructure.clock import FixedClock

DAY_0 = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def day0():
    return DAY_0


@pytest.fixture
def clock():
    return FixedClock(DAY_0)


@pytest.fixture
def memory_repo():
    return InMemoryRepository()


@pytest.fixture
def make_item():
    """Factory for items at an arbitrary point in their schedule."""
    counter = iter(range(1, 10_000))

    def _make(reference=None, **fields):
        n = next(counter)
        base = MemoryItem.create(
            item_id=f"verse_{n:04d}",
            reference=reference or f"Psalm {n}:1",
            content=f"Verse text {n}",
            now=fields.pop("now", DAY_0),
        )
        if fields:
            base = replace(base, **fields)
        return base

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir and clears VERSEMEM_* overrides."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("VERSEMEM_DB_PATH", raising=False)
    monkeypatch.delenv("VERSEMEM_BACKEND", raising=False)
    monkeypatch.delenv("VERSEMEM_USER_ID", raising=False)
    monkeypatch.delenv("VERSEMEM_TIMEZONE", raising=False)
    return home
