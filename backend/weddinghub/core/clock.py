"""
Injectable clock.

Services never call ``datetime.now`` directly; they receive a clock so that
timestamps written by the booking state machine are deterministic in tests.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """FastAPI dependency returning the wall clock. Overridden in tests."""
    return utc_now


def fixed_clock(instant: datetime) -> Clock:
    """Clock that always returns ``instant``."""

    def _now() -> datetime:
        return instant

    return _now
