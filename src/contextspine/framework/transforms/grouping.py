"""Grouping and deduplication transforms."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from contextspine.core.errors import PipelineError
from contextspine.framework.params import ParamDef
from contextspine.framework.registry import TransformAction, register_transform
from contextspine.framework.transforms.base import get_path, map_groups, require_list

DEDUP_PARAMS = [
    ParamDef("dedupField", str, "Field whose value identifies duplicates", required=True),
    ParamDef("priorityField", str, "Field ranked by priorityValues", default=""),
    ParamDef("priorityValues", list, "Preferred values, best first", default=[]),
]


@register_transform(TransformAction.GROUP_BY_DATE)
def group_by_date(events: Any) -> list[dict[str, Any]]:
    """
    Fold a labelled sequence into ``{date, items}`` groups.

    Each record with a truthy ``date`` opens a group and joins it without
    its ``date`` field; records after it without a label join the open
    group. Typically runs after TimeAgo, TimeAgoInDays or DisplayDate.
    """
    groups: list[dict[str, Any]] = []
    for event in require_list(events, TransformAction.GROUP_BY_DATE.value):
        label = event.get("date") if isinstance(event, Mapping) else None
        if label:
            item = {k: v for k, v in event.items() if k != "date"}
            groups.append({"date": label, "items": [item]})
        elif groups:
            groups[-1]["items"].append(event)
        else:
            raise PipelineError(
                "GroupByDate requires the first record to carry a date label"
            ).with_context(transform=TransformAction.GROUP_BY_DATE.value)
    return groups


def remove_duplicate_records(
    items: list[Any],
    dedup_field: str,
    priority_field: str = "",
    priority_values: list[Any] | None = None,
) -> list[Any]:
    """Keep one record per ``dedup_field`` value.

    The survivor has the lowest index of its ``priority_field`` value in
    ``priority_values``; unlisted values rank below every listed one and
    ties go to the first occurrence. Survivors keep their input order.
    """
    ranking = list(priority_values or [])
    unranked = len(ranking)

    def rank(record: Any) -> int:
        value = get_path(record, priority_field) if priority_field else None
        try:
            return ranking.index(value)
        except ValueError:
            return unranked

    best: dict[Any, tuple[int, int]] = {}
    for index, record in enumerate(items):
        key = get_path(record, dedup_field)
        try:
            hash(key)
        except TypeError:
            key = repr(key)
        candidate = (rank(record), index)
        if key not in best or candidate < best[key]:
            best[key] = candidate

    keep = {index for _, index in best.values()}
    return [record for index, record in enumerate(items) if index in keep]


@register_transform(TransformAction.REMOVE_DUPLICATES, params=DEDUP_PARAMS)
def remove_duplicates(
    items: Any, *, dedupField: str, priorityField: str, priorityValues: list[Any]
) -> list[Any]:
    """Drop duplicate records, keeping the highest-priority one of each."""
    records = require_list(items, TransformAction.REMOVE_DUPLICATES.value)
    return remove_duplicate_records(records, dedupField, priorityField, priorityValues)


@register_transform(TransformAction.REMOVE_DUPLICATES_FROM_GROUPS, params=DEDUP_PARAMS)
def remove_duplicates_from_groups(
    groups: Any, *, dedupField: str, priorityField: str, priorityValues: list[Any]
) -> list[Any]:
    """RemoveDuplicates within each group's ``items``."""
    return map_groups(
        groups,
        TransformAction.REMOVE_DUPLICATES_FROM_GROUPS.value,
        lambda items: remove_duplicate_records(
            items, dedupField, priorityField, priorityValues
        ),
    )
