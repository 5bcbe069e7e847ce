"""Recursive context resolver — concurrent fan-out over a template tree.

WHY
───
A page template declares everything the page needs in one tree. Each
``_query`` node is an independent backend call, so the whole tree is
resolved with ``asyncio.gather`` and finishes as fast as its slowest
directive. One failing widget must not blank the page, so every directive
failure is contained at its own node and replaced by its ``_default``.

ARCHITECTURE
────────────
::

    ContextResolver.resolve(tree, extra)
      ├── validate(tree)                      ─ TemplateError before any I/O
      └── _resolve_node(node)
            ├── {_query, _process?, _default?} ─ _resolve_directive
            │     dispatcher.execute → unwrap_envelope → run_pipeline
            ├── {_data}                        ─ deep copy of the value
            ├── mapping                        ─ gather(children), key order kept
            └── sequence / scalar              ─ copied as is

Example::

    resolver = ContextResolver(QueryDispatcher(store))
    page = await resolver.resolve({
        "news": {"_query": "{cms}/list/news?limit=5", "_process": "TimeAgo", "_default": []},
        "title": {"_data": "Home"},
    })
"""

from __future__ import annotations

import asyncio
import copy
import uuid
from collections.abc import Mapping
from typing import Any

from contextspine.core.errors import TemplateError, error_to_dict
from contextspine.core.logging import LogContext, get_logger
from contextspine.framework.dispatcher import QueryDispatcher
from contextspine.framework.pipeline import run_pipeline

logger = get_logger(__name__)

QUERY_KEY = "_query"
DATA_KEY = "_data"
PROCESS_KEY = "_process"
DEFAULT_KEY = "_default"


def _unwrap_record(record: Any) -> Any:
    if isinstance(record, Mapping) and "Data" in record:
        return record["Data"]
    return record


def unwrap_envelope(value: Any) -> Any:
    """Strip the backend envelope from an adapter result.

    ``{"Item": r}`` yields ``r`` (or ``r["Data"]``), ``{"Items": [...]}``
    yields each element unwrapped the same way; anything else passes through.
    """
    if isinstance(value, Mapping):
        if "Item" in value:
            return _unwrap_record(value["Item"])
        if isinstance(value.get("Items"), list):
            return [_unwrap_record(record) for record in value["Items"]]
    return value


def is_directive(node: Any) -> bool:
    return isinstance(node, Mapping) and QUERY_KEY in node


def is_literal(node: Any) -> bool:
    return isinstance(node, Mapping) and DATA_KEY in node


class ContextResolver:
    """Resolves a template tree into a data tree.

    Parameters
    ----------
    dispatcher : QueryDispatcher
        Routes ``_query`` directives to their adapters.
    """

    def __init__(self, dispatcher: QueryDispatcher) -> None:
        self.dispatcher = dispatcher

    @classmethod
    def validate(cls, tree: Any, path: str = "$", _ancestors: frozenset[int] = frozenset()) -> None:
        """Check that the tree can be scheduled.

        Container nodes are walked the way :meth:`_resolve_node` walks them;
        YAML anchors can make a container contain itself.

        Raises:
            TemplateError: for a container that is its own ancestor.
        """
        if not isinstance(tree, Mapping) or is_directive(tree) or is_literal(tree):
            return
        if id(tree) in _ancestors:
            raise TemplateError(f"Template contains a reference cycle at {path}").with_context(path=path)
        ancestors = _ancestors | {id(tree)}
        for key, child in tree.items():
            cls.validate(child, f"{path}.{key}", ancestors)

    async def resolve(self, tree: Any, extra: dict[str, Any] | None = None) -> Any:
        """
        Resolve every directive and literal in ``tree``.

        Args:
            tree: Template tree
            extra: Caller params merged into every directive

        Returns:
            A new tree of the same shape with directive and literal nodes
            replaced by their values.

        Raises:
            TemplateError: the tree contains a reference cycle. Directive
                failures never raise; they resolve to the node's default.
        """
        self.validate(tree)
        async with LogContext(resolution_id=uuid.uuid4().hex[:12]):
            logger.debug("resolver.start")
            result = await self._resolve_node(tree, extra, "$")
            logger.debug("resolver.complete")
        return result

    async def _resolve_node(self, node: Any, extra: dict[str, Any] | None, path: str) -> Any:
        if is_directive(node):
            return await self._resolve_directive(node, extra, path)
        if is_literal(node):
            return copy.deepcopy(node[DATA_KEY])
        if isinstance(node, Mapping):
            keys = list(node)
            values = await asyncio.gather(
                *(self._resolve_node(node[key], extra, f"{path}.{key}") for key in keys)
            )
            return dict(zip(keys, values))
        return copy.deepcopy(node)

    async def _resolve_directive(
        self, node: Mapping[str, Any], extra: dict[str, Any] | None, path: str
    ) -> Any:
        query = node[QUERY_KEY]
        if DATA_KEY in node:
            logger.warning("resolver.data_ignored", path=path, query=query)
        try:
            raw = await self.dispatcher.execute(query, extra)
            return run_pipeline(unwrap_envelope(raw), node.get(PROCESS_KEY))
        except Exception as e:
            logger.warning("resolver.query_failed", path=path, query=query, error=error_to_dict(e))
            if DEFAULT_KEY in node:
                logger.info("resolver.fallback_default", path=path)
                return copy.deepcopy(node[DEFAULT_KEY])
            logger.info("resolver.no_default", path=path)
            return None


__all__ = ["ContextResolver", "unwrap_envelope", "is_directive", "is_literal"]
