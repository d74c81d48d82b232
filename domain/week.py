"""
Week arithmetic.

Weeks start on Monday (ISO-8601). Everything here is a pure function of a
calendar date; a datetime is reduced to its date first.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime]

WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_DAY_OFFSETS = {name.lower(): offset for offset, name in enumerate(WEEKDAY_NAMES)}


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(value: DateLike) -> date:
    """Monday of the ISO week containing ``value``."""
    d = _as_date(value)
    return d - timedelta(days=d.weekday())


def week_end(value: DateLike) -> date:
    """Sunday closing the ISO week containing ``value``."""
    return week_start(value) + timedelta(days=6)


def iso_week_number(value: DateLike) -> int:
    """ISO-8601 week number (1-53)."""
    return _as_date(value).isocalendar()[1]


def weekday_name(value: DateLike) -> str:
    return WEEKDAY_NAMES[_as_date(value).weekday()]


def day_offset(day_name: str) -> Optional[int]:
    """
    Offset of a weekday name from Monday (Monday=0 ... Sunday=6).

    Matching ignores case and surrounding whitespace. Returns None for
    anything that is not an English weekday name.
    """
    if not day_name:
        return None
    return _DAY_OFFSETS.get(day_name.strip().lower())


def parse_date(value: Union[str, DateLike]) -> date:
    """Parse a store date value ("YYYY-MM-DD" or ISO timestamp)."""
    if isinstance(value, (date, datetime)):
        return _as_date(value)
    return date.fromisoformat(value[:10])
