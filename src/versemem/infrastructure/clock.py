from datetime import datetime, timedelta
from zoneinfo import ZoneInfo


class SystemClock:
    """Wall clock in the user's timezone, so "today" matches their calendar."""

    def __init__(self, timezone: str = "UTC"):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """Clock pinned to a given instant; advance() moves it forward."""

    def __init__(self, instant: datetime):
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def advance(self, **delta: float) -> None:
        self.instant = self.instant + timedelta(**delta)
