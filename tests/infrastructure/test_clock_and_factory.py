from datetime import datetime, timezone

from versemem.application.config import AppConfig
from versemem.infrastructure.adapters.factory import get_memory_service, get_repository
from versemem.infrastructure.adapters.memory_store import InMemoryRepository
from versemem.infrastructure.adapters.sqlite_store import SqliteMemoryRepository
from versemem.infrastructure.clock import FixedClock, SystemClock


def test_system_clock_is_timezone_aware():
    now = SystemClock("Asia/Tokyo").now()
    assert now.tzinfo is not None
    assert now.utcoffset().total_seconds() == 9 * 3600


def test_fixed_clock_advance():
    clock = FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
    clock.advance(days=2, hours=3)
    assert clock.now() == datetime(2026, 1, 3, 3, tzinfo=timezone.utc)


def test_get_repository_by_backend(mock_home, tmp_path):
    assert isinstance(get_repository(AppConfig(backend="memory")), InMemoryRepository)

    repo = get_repository(AppConfig(backend="sqlite", db_path=tmp_path / "v.db"))
    assert isinstance(repo, SqliteMemoryRepository)
    assert repo.db_path == tmp_path / "v.db"


def test_get_memory_service(mock_home):
    config = AppConfig(backend="memory", user_id="elder", default_translation="ESV")
    service = get_memory_service(config)
    assert service.user_id == "elder"
    assert service.default_translation == "ESV"

    assert get_memory_service(config, user_id="deacon").user_id == "deacon"
