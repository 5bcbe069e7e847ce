"""In-memory content store.

Backs the CLI and the test suite. Records are plain mappings with an ``id``
and a ``type``; ``TS``, ``featured`` and ``items`` (the ids a curated list
record points to) are optional. Fields may sit on the record itself or
inside a ``Data`` payload, matching the envelopes real backends return.

Example content file::

    [
      {"id": "n1", "type": "news", "TS": 1503072614411, "title": "Opening"},
      {"id": "home-picks", "type": "list", "items": ["n1"]}
    ]
"""

from __future__ import annotations

import copy
import random
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from contextspine.core.errors import BackendError, BadParamsError, ConfigError, SourceNotFoundError
from contextspine.core.logging import get_logger
from contextspine.core.timestamps import parse_timestamp, to_epoch_ms
from contextspine.framework.sources.files import read_document
from contextspine.framework.sources.protocol import Envelope

logger = get_logger(__name__)

DEFAULT_LIMIT = 10


def record_field(record: Mapping[str, Any], name: str) -> Any:
    """Read ``name`` from the record, falling back to its ``Data`` payload."""
    if name in record:
        return record[name]
    payload = record.get("Data")
    if isinstance(payload, Mapping):
        return payload.get(name)
    return None


def parse_limit(params: Mapping[str, Any]) -> int:
    """Positive ``limit`` from params, :data:`DEFAULT_LIMIT` when absent."""
    raw = params.get("limit")
    if raw is None:
        return DEFAULT_LIMIT
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise BadParamsError(f"limit must be an integer, got {raw!r}", invalid_params=["limit"]) from None
    if value <= 0:
        raise BadParamsError(f"limit must be positive, got {value}", invalid_params=["limit"])
    return value


class MemoryContentStore:
    """:class:`~contextspine.framework.sources.protocol.ContentStore` over a list of records."""

    def __init__(self, records: Iterable[Mapping[str, Any]], seed: int | None = None):
        self._records: dict[str, dict[str, Any]] = {}
        for record in records:
            if not isinstance(record, Mapping) or record.get("id") is None:
                raise ConfigError(f"Content record without an id: {record!r}")
            self._records[str(record["id"])] = dict(record)
        self._random = random.Random(seed)

    @classmethod
    def from_file(cls, path: str | Path, seed: int | None = None) -> MemoryContentStore:
        """Load records from a JSON/YAML file (a list, or ``{"records": [...]}``)."""
        data = read_document(path)
        if isinstance(data, Mapping):
            data = data.get("records")
        if not isinstance(data, list):
            raise ConfigError(f"Expected a list of records in {path}").with_context(path=str(path))
        logger.debug("memory_store.loaded", path=str(path), records=len(data))
        return cls(data, seed=seed)

    def __len__(self) -> int:
        return len(self._records)

    def _of_type(self, content_type: str) -> list[dict[str, Any]]:
        return [r for r in self._records.values() if record_field(r, "type") == content_type]

    @staticmethod
    def _newest_first(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        def key(record: dict[str, Any]) -> int:
            ts = parse_timestamp(record_field(record, "TS"))
            return to_epoch_ms(ts) if ts else -1

        return sorted(records, key=key, reverse=True)

    @staticmethod
    def _items(records: list[dict[str, Any]]) -> Envelope:
        return {"Items": copy.deepcopy(records)}

    def _lookup(self, target: str) -> dict[str, Any]:
        record = self._records.get(target)
        if record is None:
            raise SourceNotFoundError(f"No content record with id {target}").with_context(target=target)
        return record

    async def get(self, target: str, params: dict[str, Any]) -> Envelope:
        return {"Item": copy.deepcopy(self._lookup(target))}

    async def list_by_type(self, target: str, params: dict[str, Any]) -> Envelope:
        limit = parse_limit(params)
        return self._items(self._newest_first(self._of_type(target))[:limit])

    async def featured_by_type(self, target: str, params: dict[str, Any]) -> Envelope:
        limit = parse_limit(params)
        featured = [r for r in self._of_type(target) if record_field(r, "featured")]
        return self._items(self._newest_first(featured)[:limit])

    async def highlighted_list(self, target: str, params: dict[str, Any]) -> Envelope:
        limit = parse_limit(params)
        ids = record_field(self._lookup(target), "items")
        if not isinstance(ids, list):
            raise BackendError(f"Record {target} is not a list").with_context(target=target)
        records = [self._records[str(i)] for i in ids if str(i) in self._records]
        return self._items(records[:limit])

    async def random_list(self, target: str, params: dict[str, Any]) -> Envelope:
        limit = parse_limit(params)
        candidates = self._of_type(target)
        return self._items(self._random.sample(candidates, min(limit, len(candidates))))
