"""Ordering and truncation transforms."""

from __future__ import annotations

from typing import Any

from contextspine.core.errors import BadParamsError
from contextspine.framework.params import ParamDef
from contextspine.framework.registry import TransformAction, register_transform
from contextspine.framework.transforms.base import get_path, map_groups, require_list

SORT_PARAMS = [
    ParamDef("fields", list, "Dot paths to sort by, most significant first", default=[]),
    ParamDef("orders", list, "asc or desc per field (default asc)", default=[]),
]


@register_transform(
    TransformAction.LIMIT,
    params=[ParamDef("size", int, "Maximum number of items", default=10)],
)
def limit(items: Any, *, size: int) -> list[Any]:
    """Keep the first ``size`` items."""
    if size < 0:
        raise BadParamsError(f"Limit size must not be negative: {size}", invalid_params=["size"])
    return require_list(items, TransformAction.LIMIT.value)[:size]


def _sort_key(value: Any) -> tuple[int, Any]:
    # Numbers before strings before anything else, so mixed columns still sort.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, repr(value))


def sort_records(items: list[Any], fields: list[str], orders: list[str]) -> list[Any]:
    """Stable multi-key sort.

    Missing or ``None`` values sort last ascending and first descending.
    """
    normalized = [str(o).lower() for o in orders]
    for order in normalized:
        if order not in ("asc", "desc"):
            raise BadParamsError(f"Unknown sort order: {order}", invalid_params=["orders"])

    result = list(items)
    for position in reversed(range(len(fields))):
        path = fields[position]
        descending = position < len(normalized) and normalized[position] == "desc"
        present = [r for r in result if get_path(r, path) is not None]
        missing = [r for r in result if get_path(r, path) is None]
        present.sort(key=lambda r: _sort_key(get_path(r, path)), reverse=descending)
        result = missing + present if descending else present + missing
    return result


@register_transform(TransformAction.SORT, params=SORT_PARAMS)
def sort(items: Any, *, fields: list[str], orders: list[str]) -> list[Any]:
    """Sort records by one or more fields."""
    return sort_records(require_list(items, TransformAction.SORT.value), fields, orders)


@register_transform(TransformAction.SORT_EACH_GROUP, params=SORT_PARAMS)
def sort_each_group(groups: Any, *, fields: list[str], orders: list[str]) -> list[Any]:
    """Sort the ``items`` of every group."""
    return map_groups(
        groups,
        TransformAction.SORT_EACH_GROUP.value,
        lambda items: sort_records(items, fields, orders),
    )
