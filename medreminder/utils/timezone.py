from datetime import datetime, date, time
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from medreminder.core.config import settings


def get_zoneinfo() -> ZoneInfo:
    return ZoneInfo(settings.DEFAULT_TIMEZONE)


def now_local() -> datetime:
    return datetime.now(get_zoneinfo())


def wall_clock_now() -> datetime:
    """Naive local time, the clock reminder_logs timestamps are stored in."""
    return now_local().replace(tzinfo=None)


def today_local() -> date:
    return now_local().date()


def is_valid_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def parse_hhmm(value: str) -> time:
    """Parse a 24h "HH:MM" dose time. Raises ValueError on anything else."""
    parts = value.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return time(int(parts[0]), int(parts[1]))


def minutes_of_day(value) -> int:
    """Minutes since midnight for a datetime, time or "HH:MM" string."""
    if isinstance(value, str):
        value = parse_hhmm(value)
    return value.hour * 60 + value.minute
