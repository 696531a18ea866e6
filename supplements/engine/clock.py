"""Minute-of-day arithmetic for wake-relative dosing."""

import structlog

from shared.config import WAKE_TIME_PATTERN
from supplements.engine.errors import InvalidTimeFormat

logger = structlog.get_logger()

MINUTES_PER_DAY = 1440
UPON_WAKING = "Upon Waking"


def parse_wake_time(value: str) -> int:
    """Parse "HH:MM" (24h, hour may be one digit) into minutes since midnight."""
    if not isinstance(value, str) or not WAKE_TIME_PATTERN.fullmatch(value):
        raise InvalidTimeFormat(value)
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def safe_wake_minute(value: str) -> int:
    """Like parse_wake_time, but a malformed value resolves to 00:00."""
    try:
        return parse_wake_time(value)
    except InvalidTimeFormat:
        logger.warning("wake_time_invalid", wake_time=repr(value), fallback="00:00")
        return 0


def add_offset(wake_minute: int, offset_minutes: int) -> int:
    """Minute-of-day plus offset, wrapped into [0, 1439]."""
    return (wake_minute + offset_minutes) % MINUTES_PER_DAY


def resolve_absolute_minute(wake_time: str, offset_minutes: int) -> int:
    return add_offset(parse_wake_time(wake_time), offset_minutes)


def format_minute_of_day(minute: int) -> str:
    """Render a minute-of-day as "h:mm AM/PM"; 0:xx and 12:xx both show as 12."""
    minute %= MINUTES_PER_DAY
    hours, mins = divmod(minute, 60)
    suffix = "AM" if hours < 12 else "PM"
    display_hour = hours % 12 or 12
    return f"{display_hour}:{mins:02d} {suffix}"


def describe_offset(offset_minutes: int) -> str:
    if offset_minutes == 0:
        return UPON_WAKING
    hours, mins = divmod(offset_minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}m after waking"
    if hours:
        return f"{hours}h after waking"
    return f"{mins} min after waking"
