"""Synthetic sequence generators for ``{gen}/...`` directives.

Generators produce data without a content store, e.g. the year/month
markers used to render an archive timeline::

    {gen}/timeline/months?startDate=2019-12&endDate=2020-01

    [
      {"date": "2019", "ref": "2019", "type": "year"},
      {"date": "December 2019", "ref": "2019-12", "type": "month"},
      {"date": "2020", "ref": "2020", "type": "year", "current": true},
      {"date": "January 2020", "ref": "2020-01", "type": "month"},
    ]

Tags:
    contextspine, framework, generators, timeline

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from contextspine.core import dates
from contextspine.core.errors import GeneratorError
from contextspine.core.logging import get_logger
from contextspine.framework.params import ParamDef

logger = get_logger(__name__)

YEAR_UNITS = {"year", "years"}
MONTH_UNITS = {"month", "months"}

_SHORT_MONTH = ParamDef("shortMonth", bool, default=False)


class TimelineGenerator:
    """Year and month markers between two date expressions."""

    def __init__(self, timezone: str = dates.DEFAULT_TIMEZONE):
        self.timezone = timezone

    async def timeline(self, unit: str, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Generate markers for ``unit`` (``year(s)`` or ``month(s)``).

        ``startDate`` and ``endDate`` default to ``now``; a relative
        ``endDate`` such as ``-12 months`` is evaluated against the start.
        Start after end yields markers in descending order.

        Raises:
            GeneratorError: for an unsupported unit or bad ``shortMonth``.
        """
        params = params or {}
        normalized = (unit or "").lower()
        if normalized not in YEAR_UNITS | MONTH_UNITS:
            raise GeneratorError(f"Unknown timeline unit: {unit}").with_context(target=unit)

        short_month = params.get("shortMonth", False)
        if short_month is None:
            # bare ``shortMonth`` in a query string
            short_month = True
        try:
            short_month = _SHORT_MONTH.coerce(short_month)
        except ValueError as e:
            raise GeneratorError(f"Invalid shortMonth: {e}", cause=e) from e

        start = dates.convert_date(params.get("startDate") or "now", tz=self.timezone)
        end = dates.convert_date(
            params.get("endDate") or "now", base=start, tz=self.timezone
        )
        logger.debug(
            "generator.timeline",
            unit=normalized,
            start=start.isoformat() if start else None,
            end=end.isoformat() if end else None,
        )
        if start is None or end is None:
            return []

        return dates.get_timeline(
            start,
            end,
            months=normalized in MONTH_UNITS,
            short_month=short_month,
            tz=self.timezone,
        )


__all__ = ["TimelineGenerator"]
