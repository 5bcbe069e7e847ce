"""
Calendar decomposition and display labels for content timestamps.

Pure functions over a timestamp, a set of options and the clock from
:mod:`contextspine.core.timestamps`. All calendar math happens in a
reference timezone (``America/Chicago`` unless told otherwise), so
"Today" means today for the site's readers, not for the server.

``hours_offset`` shifts both the timestamp and "now" before calendar
fields are read, which moves the day boundary (e.g. ``-5`` makes items
published before 5 AM count as the previous day).

Tags:
    dates, calendar, relative-time, timezone, contextspine

Doc-Types:
    - API Reference
    - Utility Documentation
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta, tzinfo
from functools import lru_cache
from typing import Any
from zoneinfo import ZoneInfo

from contextspine.core import timestamps

DEFAULT_TIMEZONE = "America/Chicago"

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
SHORT_MONTHS = [m[:3] for m in MONTHS]
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

YEAR_MODES = ("default", "always", "never")

_RELATIVE = re.compile(
    r"^(?P<now>now)?\s*(?P<sign>[+-])\s*(?P<amount>\d+)\s*"
    r"(?P<unit>year|month|week|day|hour)s?$",
    re.IGNORECASE,
)
# Date strings without an offset are wall-clock times in the reference zone.
_WALL_CLOCK = re.compile(
    r"^\d{4}(-\d{1,2}(-\d{1,2}([T ]\d{1,2}:\d{2}(:\d{2}(\.\d+)?)?)?)?)?$"
)


@lru_cache(maxsize=32)
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def resolve_timezone(tz: str | tzinfo | None) -> tzinfo:
    """Return a tzinfo for a zone name, a tzinfo, or None (reference zone)."""
    if tz is None:
        return _zone(DEFAULT_TIMEZONE)
    if isinstance(tz, str):
        return _zone(tz)
    return tz


def to_local(
    value: Any,
    tz: str | tzinfo | None = None,
    hours_offset: float = 0,
) -> datetime | None:
    """Parse ``value`` and express it in the reference timezone, shifted by ``hours_offset``."""
    dt = timestamps.parse_timestamp(value)
    if dt is None:
        return None
    return (dt + timedelta(hours=hours_offset)).astimezone(resolve_timezone(tz))


def local_now(
    tz: str | tzinfo | None = None,
    hours_offset: float = 0,
    now: datetime | None = None,
) -> datetime:
    current = now if now is not None else timestamps.utc_now()
    return to_local(current, tz, hours_offset)


def add_months(dt: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    next_first = datetime(year + (month == 12), month % 12 + 1, 1)
    last_day = (next_first - timedelta(days=1)).day
    return dt.replace(year=year, month=month, day=min(dt.day, last_day))


def _half_up(value: float) -> int:
    return int(value + 0.5)


# =============================================================================
# Calendar decomposition
# =============================================================================


@dataclass(frozen=True)
class CalendarDate:
    """Year/month/day of a timestamp in the reference timezone."""

    year: str
    month: str
    month_number: int
    day: int

    @property
    def ref(self) -> str:
        return f"{self.year}-{self.month_number:02d}"


def get_year_month_day(
    value: Any,
    tz: str | tzinfo | None = None,
    hours_offset: float = 0,
) -> CalendarDate | None:
    local = to_local(value, tz, hours_offset)
    if local is None:
        return None
    return CalendarDate(
        year=str(local.year),
        month=MONTHS[local.month - 1],
        month_number=local.month,
        day=local.day,
    )


def format_time(local: datetime) -> str:
    """12-hour clock without a leading zero: ``11:00 AM``, ``5:05 PM``."""
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def get_year_month_day_time(
    value: Any,
    tz: str | tzinfo | None = None,
) -> tuple[str, str, str, str] | None:
    """
    Decompose a timestamp into ``(year, month, day, time)`` display strings.

    >>> get_year_month_day_time("2017-10-03T16:00:00.000Z")
    ('2017', 'October', '03', '11:00 AM')
    """
    local = to_local(value, tz)
    if local is None:
        return None
    return (
        str(local.year),
        MONTHS[local.month - 1],
        f"{local.day:02d}",
        format_time(local),
    )


# =============================================================================
# Relative labels
# =============================================================================


def days_ago(
    value: Any,
    tz: str | tzinfo | None = None,
    hours_offset: float = 0,
    now: datetime | None = None,
) -> int | None:
    """Whole calendar days between ``value`` and now (positive = past)."""
    local = to_local(value, tz, hours_offset)
    if local is None:
        return None
    today = local_now(tz, hours_offset, now)
    return (today.date() - local.date()).days


def relative_day_label(days: int) -> str:
    if days == 0:
        return "Today"
    if days == 1:
        return "Yesterday"
    if days == -1:
        return "Tomorrow"
    if days > 1:
        return f"{days} days ago"
    return f"in {-days} days"


def get_time_ago_in_days(
    value: Any,
    hours_offset: float = 0,
    tz: str | tzinfo | None = None,
    now: datetime | None = None,
) -> str | None:
    days = days_ago(value, tz, hours_offset, now)
    if days is None:
        return None
    return relative_day_label(days)


def _humanize(seconds: float) -> str:
    # Thresholds follow the usual "fromNow" conventions.
    if seconds < 45:
        return "a few seconds"
    if seconds < 90:
        return "a minute"
    minutes = _half_up(seconds / 60)
    if minutes < 45:
        return f"{minutes} minutes"
    if minutes < 90:
        return "an hour"
    hours = _half_up(seconds / 3600)
    if hours < 22:
        return f"{hours} hours"
    if hours < 36:
        return "a day"
    days = _half_up(seconds / 86400)
    if days < 26:
        return f"{days} days"
    if days < 45:
        return "a month"
    if days < 320:
        return f"{max(2, _half_up(days / 30.4))} months"
    if days < 548:
        return "a year"
    return f"{max(2, _half_up(days / 365.25))} years"


def get_time_ago(value: Any, now: datetime | None = None) -> str | None:
    """Relative label such as ``2 days ago`` or ``in 3 hours``."""
    dt = timestamps.parse_timestamp(value)
    if dt is None:
        return None
    current = now if now is not None else timestamps.utc_now()
    delta = (current - dt).total_seconds()
    label = _humanize(abs(delta))
    return f"{label} ago" if delta >= 0 else f"in {label}"


# =============================================================================
# Formatted dates
# =============================================================================


def format_date(
    local: datetime,
    today: datetime,
    year: str = "default",
    short_month: bool = False,
    day_of_week: bool = False,
) -> str:
    if year not in YEAR_MODES:
        raise ValueError(f"Unknown year mode: {year}")
    names = SHORT_MONTHS if short_month else MONTHS
    text = f"{names[local.month - 1]} {local.day}"
    if year == "always" or (year == "default" and local.year != today.year):
        text += f", {local.year}"
    if day_of_week:
        text = f"{WEEKDAYS[local.weekday()]}, {text}"
    return text


def get_formatted_date(
    value: Any,
    year: str = "default",
    short_month: bool = False,
    day_of_week: bool = False,
    tz: str | tzinfo | None = None,
    hours_offset: float = 0,
    now: datetime | None = None,
) -> str | None:
    """
    >>> get_formatted_date("2020-08-01T12:00:00.000Z", year="always", day_of_week=True)
    'Saturday, August 1, 2020'
    """
    local = to_local(value, tz, hours_offset)
    if local is None:
        return None
    today = local_now(tz, hours_offset, now)
    return format_date(local, today, year, short_month, day_of_week)


def get_display_date(
    value: Any,
    relative_days: int = 2,
    hours_offset: float = 0,
    year: str = "default",
    short_month: bool = False,
    tz: str | tzinfo | None = None,
    now: datetime | None = None,
) -> str | None:
    """Relative label for recent days, formatted date otherwise."""
    local = to_local(value, tz, hours_offset)
    if local is None:
        return None
    today = local_now(tz, hours_offset, now)
    days = (today.date() - local.date()).days
    if 0 <= days < relative_days:
        return relative_day_label(days)
    return format_date(local, today, year, short_month)


# =============================================================================
# Date expressions and timelines
# =============================================================================


def convert_date(
    value: Any,
    base: datetime | None = None,
    now: datetime | None = None,
    tz: str | tzinfo | None = None,
) -> datetime | None:
    """
    Evaluate a date expression to an aware UTC datetime.

    Accepts ``now``, ``now-6months``, relative offsets such as ``-2 years``
    (applied to ``base``, or now when no base is given) and anything
    :func:`~contextspine.core.timestamps.parse_timestamp` understands.
    Strings like ``2019-12`` or ``2019-12-01T08:00`` carry no offset and are
    read as wall-clock time in ``tz``.
    """
    current = now if now is not None else timestamps.utc_now()
    if isinstance(value, str):
        text = value.strip()
        if _WALL_CLOCK.match(text):
            parsed = timestamps.parse_timestamp(text)
            if parsed is None:
                return None
            return parsed.replace(tzinfo=resolve_timezone(tz)).astimezone(UTC)
        if text.lower() == "now":
            return current
        match = _RELATIVE.match(text)
        if match:
            origin = current if match.group("now") or base is None else base
            amount = int(match.group("amount"))
            if match.group("sign") == "-":
                amount = -amount
            unit = match.group("unit").lower()
            if unit == "year":
                return add_months(origin, 12 * amount)
            if unit == "month":
                return add_months(origin, amount)
            if unit == "week":
                return origin + timedelta(weeks=amount)
            if unit == "day":
                return origin + timedelta(days=amount)
            return origin + timedelta(hours=amount)
    return timestamps.parse_timestamp(value)


def year_marker(year: int | str, current: bool = False) -> dict[str, Any]:
    marker: dict[str, Any] = {"date": str(year), "ref": str(year), "type": "year"}
    if current:
        marker["current"] = True
    return marker


def month_marker(
    year: int | str,
    month_number: int,
    show_year: bool = True,
    short_month: bool = False,
    current: bool = False,
) -> dict[str, Any]:
    names = SHORT_MONTHS if short_month else MONTHS
    label = names[month_number - 1]
    if show_year:
        label = f"{label} {year}"
    marker: dict[str, Any] = {
        "date": label,
        "ref": f"{year}-{month_number:02d}",
        "type": "month",
    }
    if current:
        marker["current"] = True
    return marker


def get_timeline(
    start: datetime,
    end: datetime,
    months: bool = True,
    short_month: bool = False,
    tz: str | tzinfo | None = None,
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """
    Year (and month) markers spanning ``start``..``end`` inclusive.

    Ascending when ``start`` precedes ``end``, descending otherwise. With
    ``months`` a year marker precedes the first month of each year.
    """
    zone = resolve_timezone(tz)
    first = start.astimezone(zone)
    last = end.astimezone(zone)
    today = local_now(zone, now=now)

    if not months:
        step = 1 if first.year <= last.year else -1
        return [
            year_marker(y, current=y == today.year)
            for y in range(first.year, last.year + step, step)
        ]

    first_index = first.year * 12 + first.month - 1
    last_index = last.year * 12 + last.month - 1
    step = 1 if first_index <= last_index else -1

    markers: list[dict[str, Any]] = []
    previous_year = None
    for index in range(first_index, last_index + step, step):
        year, month = divmod(index, 12)
        month += 1
        if year != previous_year:
            markers.append(year_marker(year, current=year == today.year))
            previous_year = year
        markers.append(
            month_marker(
                year,
                month,
                short_month=short_month,
                current=(year, month) == (today.year, today.month),
            )
        )
    return markers
