"""
Content store protocol.

The dispatcher routes ``{cms}/...`` directives to an object implementing
:class:`ContentStore`. Every operation takes the effective target and the
merged directive parameters and returns a backend envelope::

    {"Item": record}                  single record (get)
    {"Item": {"Data": record}}        single record with payload wrapper
    {"Items": [record | {"Data": record}, ...]}

Implementations own their own timeouts; failures surface as exceptions
that the dispatcher wraps in :class:`~contextspine.core.errors.BackendError`.

Usage:
    from contextspine.framework.sources import MemoryContentStore

    store = MemoryContentStore.from_file("content.json")
    envelope = await store.list_by_type("news", {"limit": "5"})
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

Envelope = dict[str, Any]


@runtime_checkable
class ContentStore(Protocol):
    """
    Protocol for content backends.

    Implementations must provide five async operations, each
    ``(target, params) -> Envelope``:

    - get: one record by id
    - list_by_type: records of a type, newest first
    - featured_by_type: featured records of a type, newest first
    - highlighted_list: records named by a curated list record
    - random_list: random records of a type
    """

    async def get(self, target: str, params: dict[str, Any]) -> Envelope:
        """Fetch one record by id."""
        ...

    async def list_by_type(self, target: str, params: dict[str, Any]) -> Envelope:
        """List records of a content type, newest first."""
        ...

    async def featured_by_type(self, target: str, params: dict[str, Any]) -> Envelope:
        """List featured records of a content type, newest first."""
        ...

    async def highlighted_list(self, target: str, params: dict[str, Any]) -> Envelope:
        """Resolve a curated list record to the records it names."""
        ...

    async def random_list(self, target: str, params: dict[str, Any]) -> Envelope:
        """Random sample of records of a content type."""
        ...
