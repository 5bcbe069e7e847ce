"""
Query dispatcher.

Routes a parsed directive to the adapter that serves it:

    {cms}/get/<id>            -> store.get
    {cms}/list/<type>         -> store.list_by_type
    {cms}/featured/<type>     -> store.featured_by_type
    {cms}/highlight/<list>    -> store.highlighted_list
    {cms}/random/<type>       -> store.random_list
    {gen}/timeline/<unit>     -> TimelineGenerator.timeline

Caller-supplied params are merged under the directive's own params (see
:func:`~contextspine.framework.params.merge_query_params`); the target is
the path segment, else ``params["target"]``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from contextspine.core.errors import (
    BackendError,
    ContextSpineError,
    MissingTargetError,
    UnknownActionError,
    UnknownModuleError,
)
from contextspine.core.logging import get_logger
from contextspine.framework.generators import TimelineGenerator
from contextspine.framework.params import merge_query_params
from contextspine.framework.query import ParsedQuery, parse_query
from contextspine.framework.sources.protocol import ContentStore

log = get_logger(__name__)

AdapterCall = Callable[[str, dict[str, Any]], Awaitable[Any]]


class QueryDispatcher:
    """Dispatcher for query directives.

    Holds no per-request state; one instance can serve any number of
    concurrent resolutions.
    """

    def __init__(self, store: ContentStore, generator: TimelineGenerator | None = None) -> None:
        self.store = store
        self.generator = generator or TimelineGenerator()
        self._routes: dict[str, dict[str, AdapterCall]] = {
            "cms": {
                "get": store.get,
                "list": store.list_by_type,
                "featured": store.featured_by_type,
                "highlight": store.highlighted_list,
                "random": store.random_list,
            },
            "gen": {
                "timeline": self.generator.timeline,
            },
        }

    @property
    def modules(self) -> list[str]:
        return list(self._routes)

    def actions(self, module: str) -> list[str]:
        return list(self._routes.get(module, {}))

    def _route(self, query: ParsedQuery) -> AdapterCall:
        actions = self._routes.get(query.module)
        if actions is None:
            raise UnknownModuleError(query.module).with_context(module=query.module)
        call = actions.get(query.action)
        if call is None:
            raise UnknownActionError(query.module, query.action).with_context(
                module=query.module, action=query.action
            )
        return call

    async def dispatch(self, query: ParsedQuery, extra: dict[str, Any] | None = None) -> Any:
        """
        Run a parsed query against its adapter.

        Args:
            query: Parsed directive
            extra: Caller-supplied params (e.g. the page's request query)

        Returns:
            The adapter's raw result (usually a backend envelope)

        Raises:
            DispatchError: unknown module/action or missing target
            BackendError: the adapter failed
        """
        call = self._route(query)
        params = merge_query_params(query.params, extra)
        target = query.target or params.get("target")
        if not target:
            raise MissingTargetError(query.action).with_context(
                module=query.module, action=query.action
            )

        log.debug(
            "dispatcher.dispatch",
            module=query.module,
            action=query.action,
            target=target,
            param_keys=list(params),
        )
        try:
            return await call(str(target), params)
        except ContextSpineError as e:
            raise e.with_context(module=query.module, action=query.action, target=target)
        except Exception as e:
            raise BackendError(
                f"{query.module}/{query.action} failed: {e}", cause=e
            ).with_context(module=query.module, action=query.action, target=target) from e

    async def execute(self, text: str, extra: dict[str, Any] | None = None) -> Any:
        """Parse ``text`` and dispatch it."""
        query = parse_query(text)
        try:
            return await self.dispatch(query, extra)
        except ContextSpineError as e:
            raise e.with_context(query=text)


__all__ = ["QueryDispatcher"]
