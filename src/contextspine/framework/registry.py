"""Transform registry.

Manifesto:
    Templates name transforms by string. A closed enum of actions plus a
    decorator-populated registry gives one place to look names up, one
    error for unknown names, and a load-time check that every action has
    an implementation.

Tags:
    contextspine, framework, registry, transforms, lookup

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from contextspine.core.errors import ContextSpineError, UnknownTransformError
from contextspine.core.logging import get_logger
from contextspine.framework.params import ParamDef, ParamSpec

logger = get_logger(__name__)


class TransformAction(str, Enum):
    """Built-in transform names as they appear in templates."""

    CALENDAR_EVENTS = "CalendarEvents"
    TIME_AGO = "TimeAgo"
    TIME_AGO_IN_DAYS = "TimeAgoInDays"
    DISPLAY_DATE = "DisplayDate"
    ARTICLE_DATE = "ArticleDate"
    GROUP_BY_DATE = "GroupByDate"
    ADD_YEAR_MONTH_HEADINGS = "AddYearMonthHeadings"
    LIMIT = "Limit"
    REMOVE_DUPLICATES = "RemoveDuplicates"
    REMOVE_DUPLICATES_FROM_GROUPS = "RemoveDuplicatesFromGroups"
    SORT = "Sort"
    SORT_EACH_GROUP = "SortEachGroup"
    PROJECT = "Project"
    FIRST_ITEM = "FirstItem"
    NORMALIZE_IMAGES = "NormalizeImages"


TransformFunc = Callable[..., Any]


@dataclass
class TransformDef:
    """A registered transform: its function and parameter declarations."""

    action: TransformAction
    func: TransformFunc
    spec: ParamSpec = field(default_factory=ParamSpec)
    description: str = ""

    @property
    def name(self) -> str:
        return self.action.value

    def __call__(self, value: Any, raw_params: dict[str, Any] | None = None) -> Any:
        return self.func(value, **self.spec.bind(raw_params))


_registry: dict[TransformAction, TransformDef] = {}
_loaded: bool = False


def register_transform(
    action: TransformAction | str,
    params: list[ParamDef] | None = None,
) -> Callable[[TransformFunc], TransformFunc]:
    """Decorator to register a transform function for ``action``.

    The function is called as ``func(value, **bound_params)``.
    """
    action = TransformAction(action)

    def decorator(func: TransformFunc) -> TransformFunc:
        if action in _registry:
            raise ValueError(f"Transform '{action.value}' is already registered")
        doc = (func.__doc__ or "").strip()
        _registry[action] = TransformDef(
            action=action,
            func=func,
            spec=ParamSpec(list(params or [])),
            description=doc.splitlines()[0] if doc else "",
        )
        logger.debug("transform.registered", name=action.value, func=func.__name__)
        return func

    return decorator


def _ensure_loaded() -> None:
    """Ensure built-in transforms are loaded (lazy initialization)."""
    global _loaded
    if not _loaded:
        _load_transforms()
        _loaded = True


def _load_transforms() -> None:
    """Import the built-in transform modules and check every action is covered."""
    import contextspine.framework.transforms  # noqa: F401

    missing = [a.value for a in TransformAction if a not in _registry]
    if missing:
        raise ContextSpineError(f"Transforms without implementation: {', '.join(missing)}")
    logger.debug("transform.registry_loaded", registered=len(_registry))


def get_transform(name: TransformAction | str) -> TransformDef:
    """Get a transform definition by name.

    Raises:
        UnknownTransformError: if ``name`` is not a built-in transform.
    """
    _ensure_loaded()
    try:
        action = TransformAction(name)
    except ValueError:
        raise UnknownTransformError(str(name), available=list_transforms()) from None
    return _registry[action]


def list_transforms() -> list[str]:
    """List all registered transform names."""
    _ensure_loaded()
    return sorted(a.value for a in _registry)


__all__ = [
    "TransformAction",
    "TransformDef",
    "register_transform",
    "get_transform",
    "list_transforms",
]
