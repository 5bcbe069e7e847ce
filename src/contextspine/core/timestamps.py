"""
Timestamp parsing and the clock (stdlib-only).

Content records carry their time either as ``TS`` (epoch milliseconds) or
as an ISO 8601 string (``date``, ``publishUp``). Everything downstream works
on timezone-aware UTC datetimes produced here.

``utc_now()`` is the single clock used by the date helpers, relative labels
and the timeline generator; tests patch it to freeze time.

Tags:
    timestamps, utc, datetime, parsing, contextspine, stdlib-only

Doc-Types:
    - API Reference
    - Utility Documentation
"""

import re
from datetime import UTC, date, datetime, time
from typing import Any

_NUMERIC = re.compile(r"^-?\d+(\.\d+)?$")
_YEAR = re.compile(r"^\d{4}$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def from_epoch_ms(value: int | float) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=UTC)


def to_epoch_ms(dt: datetime) -> int:
    """Convert a datetime to epoch milliseconds (naive values are UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return int(dt.timestamp() * 1000)


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse a record timestamp into an aware UTC datetime.

    Accepts epoch milliseconds (int, float or numeric string), ISO 8601
    strings (``Z`` suffix allowed; naive values are UTC), ``YYYY`` and
    ``YYYY-MM`` shorthands, and ``date``/``datetime`` objects.

    Returns None for anything else, including booleans and empty strings.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=UTC)
    if isinstance(value, (int, float)):
        try:
            return from_epoch_ms(value)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None
    if _NUMERIC.match(text) and not _YEAR.match(text):
        return parse_timestamp(float(text))
    if _YEAR.match(text):
        return datetime(int(text), 1, 1, tzinfo=UTC)
    match = _YEAR_MONTH.match(text)
    if match:
        month = int(match.group(2))
        if not 1 <= month <= 12:
            return None
        return datetime(int(match.group(1)), month, 1, tzinfo=UTC)

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)

