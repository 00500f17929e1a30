"""Test doubles shared by fixtures and test modules"""

from datetime import datetime
from zoneinfo import ZoneInfo

from reservo.booking.clock import Clock
from reservo.notifications.base import NotificationDispatcher

CIVIL_TZ = ZoneInfo("Europe/Tirane")
ADMIN_KEY = "test-admin-key"


def civil(year, month, day, hour=0, minute=0) -> datetime:
    """A wall-clock instant in the restaurant's time zone"""
    return datetime(year, month, day, hour, minute, tzinfo=CIVIL_TZ)


class FixedClock(Clock):
    """Clock frozen at `current` until a test moves it"""

    def __init__(self, current: datetime):
        super().__init__(CIVIL_TZ.key)
        self.current = current

    def now(self) -> datetime:
        return self.current


class RecordingDispatcher(NotificationDispatcher):
    def __init__(self):
        self.events = []

    def emit(self, event):
        self.events.append(event)

    @property
    def types(self):
        return [event.type.value for event in self.events]


class FailingDispatcher(NotificationDispatcher):
    def emit(self, event):
        raise RuntimeError("webhook queue is down")
