"""
Duration and time arithmetic for requests.

The validator and the listing both go through `minutes_between`, so the
60-minute permission cap and the rendered duration cannot disagree.
"""
import re
from datetime import date
from typing import Optional

from leavedesk.models.leave_request import RequestType

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time(value: str) -> int:
    """Minutes since midnight for a 24-hour "HH:MM" string. Raises ValueError."""
    match = _TIME_RE.match(value.strip()) if value else None
    if not match:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hour * 60 + minute


def minutes_between(from_time: str, to_time: str) -> int:
    # Same-day clock arithmetic; "23:30" -> "00:15" is negative, not 45.
    return parse_time(to_time) - parse_time(from_time)


def format_minutes(minutes: int) -> str:
    if minutes >= 60:
        return f"{minutes // 60}h {minutes % 60}m"
    return f"{minutes}m"


def permission_duration(from_time: Optional[str], to_time: Optional[str]) -> str:
    if not from_time or not to_time:
        return "N/A"
    return format_minutes(minutes_between(from_time, to_time))


def leave_day_count(from_date: date, to_date: date) -> int:
    """Inclusive number of calendar days."""
    return abs((to_date - from_date).days) + 1


def leave_duration(from_date: date, to_date: Optional[date]) -> str:
    if to_date is None:
        return "1 day"
    return f"{leave_day_count(from_date, to_date)} days"


def describe_duration(request) -> str:
    """Human-readable duration for any stored request (record or ORM row)."""
    if request.request_type == RequestType.PERMISSION.value:
        return permission_duration(getattr(request, "from_time", None), getattr(request, "to_time", None))
    return leave_duration(request.from_date, request.to_date)


def format_time_12h(value: Optional[str]) -> str:
    """'13:05' -> '1:05 PM'. Empty input gives an empty string."""
    if not value:
        return ""
    minutes = parse_time(value)
    hour, minute = divmod(minutes, 60)
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {period}"
