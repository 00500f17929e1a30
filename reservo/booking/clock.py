"""
Civil time helpers.

All business rules ("today", "now", cutoffs) are evaluated in one fixed civil
time zone regardless of server or client locale. Times of day are carried as
zero-padded "HH:MM" strings so they compare correctly as plain strings.
"""

import re
from datetime import date, datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from reservo.config import settings

_LOOSE_HHMM = re.compile(r"^(\d{1,2}):(\d{2})$")
_STRICT_HHMM = re.compile(r"^\d{2}:\d{2}$")

LAST_MINUTE = 23 * 60 + 59


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in the database"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_time(value) -> Optional[str]:
    """Return value as zero-padded "HH:MM", or None if it is not a valid time"""
    match = _LOOSE_HHMM.match(str(value if value is not None else "").strip())
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None

    return f"{hours:02d}:{minutes:02d}"


def is_strict_hhmm(value) -> bool:
    return isinstance(value, str) and bool(_STRICT_HHMM.match(value))


def subtract_minutes(hhmm: str, minutes: int) -> str:
    """Wall-clock subtraction clamped to the same day (never before 00:00)"""
    normalized = normalize_time(hhmm) or "00:00"
    try:
        delta = max(int(minutes), 0)
    except (TypeError, ValueError):
        delta = 0

    hours, mins = (int(part) for part in normalized.split(":"))
    total = min(max(hours * 60 + mins - delta, 0), LAST_MINUTE)

    return f"{total // 60:02d}:{total % 60:02d}"


class Clock:
    """Resolves "now" and "today" in the civil time zone"""

    def __init__(self, tz_name: Optional[str] = None):
        self.tz = ZoneInfo(tz_name or settings.civil_timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def now_hhmm(self) -> str:
        return self.now().strftime("%H:%M")

    def utcnow(self) -> datetime:
        return self.now().astimezone(timezone.utc).replace(tzinfo=None)

    def civil_to_utc(self, service_date: date, service_time: str) -> datetime:
        """Convert a civil service date and "HH:MM" time to a naive UTC timestamp"""
        hhmm = normalize_time(service_time) or "00:00"
        hours, minutes = (int(part) for part in hhmm.split(":"))
        local = datetime(
            service_date.year, service_date.month, service_date.day, hours, minutes, tzinfo=self.tz
        )
        return local.astimezone(timezone.utc).replace(tzinfo=None)
