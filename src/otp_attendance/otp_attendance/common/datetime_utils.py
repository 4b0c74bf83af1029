from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DEFAULT_TIMEZONE, FALLBACK_UTC_OFFSET_HOURS

logger = logging.getLogger(__name__)

FALLBACK_TIMEZONE = timezone(timedelta(hours=FALLBACK_UTC_OFFSET_HOURS), "WIB")


def load_timezone(name: str | None = None) -> tzinfo:
    """Resolve the reference timezone.

    Falls back to a fixed UTC+07:00 zone when the tz database is missing
    (e.g. slim containers without tzdata).
    """
    name = name or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Timezone %r not available, falling back to UTC+%02d:00", name, FALLBACK_UTC_OFFSET_HOURS)
        return FALLBACK_TIMEZONE


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz: tzinfo) -> datetime:
    """Current time in the reference timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def to_local(value: datetime, tz: tzinfo) -> datetime:
    # Naive values are wall-clock time in the reference timezone.
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)



def format_time(value: datetime, tz: tzinfo, fmt: str = "%H:%M") -> str:
    return to_local(value, tz).strftime(fmt)


def is_late(value: datetime, tz: tzinfo, late_hour: int) -> bool:
    return to_local(value, tz).hour >= late_hour


def format_duration(delta: timedelta) -> str:
    """Render a work duration the way the bot always has: "8 jam 35 menit"."""
    total_minutes = max(int(delta.total_seconds() // 60), 0)
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0:
        return f"{hours} jam {minutes} menit"
    return f"{minutes} menit"


def format_long_date(value: date) -> str:
    return value.strftime("%d %B %Y")
