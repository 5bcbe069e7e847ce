"""Date annotation transforms.

Each transform copies the records it is given and writes display fields
onto the copies. Labels that repeat from one record to the next are
written only once, so a list reads as a sequence of headed runs::

    [{"TS": ..., "date": "Today"}, {"TS": ...}, {"TS": ..., "date": "6 days ago"}]

All calendar math happens in the reference timezone (``America/Chicago``
unless a ``timezone`` parameter says otherwise).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contextspine.core import dates
from contextspine.framework.params import ParamDef
from contextspine.framework.registry import TransformAction, register_transform
from contextspine.framework.transforms.base import annotate_changes, as_records, require_list

TIMEZONE = ParamDef(
    "timezone",
    str,
    "Reference timezone for calendar fields",
    default=dates.DEFAULT_TIMEZONE,
)
HOURS_OFFSET = ParamDef(
    "hoursOffset",
    float,
    "Hours added before calendar days are compared",
    default=0,
)


@register_transform(TransformAction.CALENDAR_EVENTS, params=[TIMEZONE])
def calendar_events(events: Any, *, timezone: str) -> list[Any]:
    """Split each event's timestamp into year, month, day and time."""
    result = []
    previous: tuple[str, str, str] | None = None
    for event in require_list(events, TransformAction.CALENDAR_EVENTS.value):
        if not isinstance(event, Mapping):
            result.append(event)
            continue
        updated = dict(event)
        source = event["date"] if "date" in event else event.get("TS")
        parts = dates.get_year_month_day_time(source, timezone)
        if parts is not None:
            year, month, day, time = parts
            if previous is None or previous[0] != year:
                updated["year"] = year
            if previous is None or previous[1] != month:
                updated["month"] = month
            if previous is None or previous[2] != day:
                updated["day"] = day
            updated["time"] = time
            previous = (year, month, day)
        result.append(updated)
    return result


@register_transform(TransformAction.TIME_AGO)
def time_ago(events: Any) -> list[Any]:
    """Label each event with how long ago it happened (``2 days ago``)."""
    records = require_list(events, TransformAction.TIME_AGO.value)
    return annotate_changes(records, lambda r: dates.get_time_ago(r.get("TS")))


@register_transform(TransformAction.TIME_AGO_IN_DAYS, params=[HOURS_OFFSET, TIMEZONE])
def time_ago_in_days(events: Any, *, hoursOffset: float, timezone: str) -> list[Any]:
    """Label each event with Today, Yesterday or ``N days ago``."""
    records = require_list(events, TransformAction.TIME_AGO_IN_DAYS.value)
    return annotate_changes(
        records,
        lambda r: dates.get_time_ago_in_days(r.get("TS"), hoursOffset, timezone),
    )


@register_transform(
    TransformAction.DISPLAY_DATE,
    params=[
        ParamDef("relativeDays", int, "Days shown as relative labels", default=2),
        HOURS_OFFSET,
        ParamDef(
            "year",
            str,
            "When to show the year",
            default="default",
            aliases=("yearMode",),
            choices=dates.YEAR_MODES,
        ),
        ParamDef("shortMonth", bool, "Abbreviate month names", default=False),
        TIMEZONE,
    ],
)
def display_date(
    events: Any,
    *,
    relativeDays: int,
    hoursOffset: float,
    year: str,
    shortMonth: bool,
    timezone: str,
) -> list[Any]:
    """Relative labels for recent events, ``June 29`` style dates otherwise."""
    records = require_list(events, TransformAction.DISPLAY_DATE.value)
    return annotate_changes(
        records,
        lambda r: dates.get_display_date(
            r.get("TS"),
            relative_days=relativeDays,
            hours_offset=hoursOffset,
            year=year,
            short_month=shortMonth,
            tz=timezone,
        ),
    )


@register_transform(
    TransformAction.ARTICLE_DATE,
    params=[
        ParamDef(
            "input",
            list,
            "Fields tried in order for a timestamp",
            default=["date", "publishUp", "TS"],
            aliases=("inputFields",),
        ),
        ParamDef(
            "shortDateField",
            str,
            "Output field for the short date",
            default="shortDate",
            aliases=("shortField",),
        ),
        ParamDef(
            "fullDateField",
            str,
            "Output field for the full date",
            default="fullDate",
            aliases=("fullField",),
        ),
        TIMEZONE,
    ],
)
def article_date(
    items: Any,
    *,
    input: list[str],
    shortDateField: str,
    fullDateField: str,
    timezone: str,
) -> Any:
    """Add ``Aug 1`` and ``Saturday, August 1, 2020`` style dates."""
    records, was_list = as_records(items)
    result = []
    for record in records:
        if not isinstance(record, Mapping):
            result.append(record)
            continue
        updated = dict(record)
        for name in input:
            if name not in record:
                continue
            short = dates.get_formatted_date(
                record[name], year="never", short_month=True, tz=timezone
            )
            if short is None:
                continue
            updated[shortDateField] = short
            updated[fullDateField] = dates.get_formatted_date(
                record[name], year="always", day_of_week=True, tz=timezone
            )
            break
        result.append(updated)
    return result if was_list else result[0]


def _representative_ts(event: Any) -> Any:
    if not isinstance(event, Mapping):
        return None
    if event.get("TS"):
        return event["TS"]
    items = event.get("items")
    if isinstance(items, list) and items and isinstance(items[0], Mapping):
        return items[0].get("TS")
    return None


@register_transform(
    TransformAction.ADD_YEAR_MONTH_HEADINGS,
    params=[
        HOURS_OFFSET,
        ParamDef("showYearInMonth", bool, "Append the year to month labels", default=True),
        TIMEZONE,
    ],
)
def add_year_month_headings(
    events: Any,
    *,
    hoursOffset: float,
    showYearInMonth: bool,
    timezone: str,
) -> list[Any]:
    """Insert year and month heading markers where the calendar changes."""
    today = dates.local_now(timezone, hoursOffset)
    result: list[Any] = []
    year = None
    month = None
    for event in require_list(events, TransformAction.ADD_YEAR_MONTH_HEADINGS.value):
        calendar = dates.get_year_month_day(_representative_ts(event), timezone, hoursOffset)
        if calendar is not None:
            if calendar.year != year:
                result.append(
                    dates.year_marker(calendar.year, current=calendar.year == str(today.year))
                )
                year = calendar.year
            if (calendar.year, calendar.month_number) != month:
                result.append(
                    dates.month_marker(
                        calendar.year,
                        calendar.month_number,
                        show_year=showYearInMonth,
                        current=(calendar.year, calendar.month_number)
                        == (str(today.year), today.month),
                    )
                )
                month = (calendar.year, calendar.month_number)
        result.append(event)
    return result
