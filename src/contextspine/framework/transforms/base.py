"""Record helpers shared by the built-in transforms."""

from __future__ import annotations

import copy
from collections.abc import Callable, Mapping
from typing import Any

from contextspine.core.errors import PipelineError

MISSING = object()


def get_path(obj: Any, path: str, default: Any = None) -> Any:
    """Read a dot path (``"images.hero.url"``) from nested mappings."""
    current = obj
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return default
    return current


def set_path(target: dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    for part in parts[:-1]:
        child = target.get(part)
        if not isinstance(child, dict):
            child = {}
            target[part] = child
        target = child
    target[parts[-1]] = value


def pick_paths(record: Mapping[str, Any], paths: list[str]) -> dict[str, Any]:
    """New mapping holding only the listed dot paths that exist in ``record``."""
    picked: dict[str, Any] = {}
    for path in paths:
        value = get_path(record, path, MISSING)
        if value is not MISSING:
            set_path(picked, path, copy.deepcopy(value))
    return picked


def require_list(value: Any, transform: str) -> list[Any]:
    if not isinstance(value, list):
        raise PipelineError(
            f"{transform} expects a list, got {type(value).__name__}"
        ).with_context(transform=transform)
    return value


def as_records(value: Any) -> tuple[list[Any], bool]:
    """Return ``(records, was_list)`` so single-record transforms can unwrap."""
    if isinstance(value, list):
        return value, True
    return [value], False


def annotate_changes(
    records: list[Any],
    label: Callable[[Mapping[str, Any]], str | None],
    field: str = "date",
) -> list[Any]:
    """Copy records, writing ``field`` only where the label changes.

    Records without a label are copied unchanged and do not reset the
    comparison.
    """
    result = []
    previous = None
    for record in records:
        if not isinstance(record, Mapping):
            result.append(record)
            continue
        updated = dict(record)
        value = label(record)
        if value:
            if value != previous:
                updated[field] = value
            previous = value
        result.append(updated)
    return result


def map_groups(groups: Any, transform: str, func: Callable[[list[Any]], list[Any]]) -> list[Any]:
    """Apply ``func`` to the non-empty ``items`` of each group."""
    result = []
    for group in require_list(groups, transform):
        items = group.get("items") if isinstance(group, Mapping) else None
        if isinstance(items, list) and items:
            result.append({**group, "items": func(items)})
        else:
            result.append(group)
    return result
