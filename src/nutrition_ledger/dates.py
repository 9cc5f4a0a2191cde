"""Date key helpers."""

from datetime import date, datetime
from zoneinfo import ZoneInfo


def date_key(day: date) -> str:
    """Return the ISO YYYY-MM-DD key for a calendar day."""
    return day.isoformat()


def local_now(timezone_name: str | None = None) -> datetime:
    """Return the current time in the given zone, or the system local zone."""
    if timezone_name:
        return datetime.now(tz=ZoneInfo(timezone_name))
    return datetime.now().astimezone()


def today_key(timezone_name: str | None = None) -> str:
    """Return today's date key in local time."""
    return date_key(local_now(timezone_name).date())


def now_millis() -> int:
    """Return the current epoch time in milliseconds."""
    return int(datetime.now().timestamp() * 1000)
