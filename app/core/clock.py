"""
Injectable time source.

Decision functions never read the wall clock themselves: handlers and jobs
read ``now`` once from a clock and pass it down, so one decision always sees
one consistent timestamp.
"""

from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from app.core.config import TIMEZONE


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in the gym's local time zone"""

    def __init__(self, timezone: str = TIMEZONE):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """Clock frozen at a given moment (tests, simulations)"""

    def __init__(self, moment: datetime):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


_system_clock = SystemClock()


def get_clock() -> Clock:
    """FastAPI dependency returning the application clock"""
    return _system_clock
