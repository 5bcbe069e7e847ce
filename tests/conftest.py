"""
Shared pytest fixtures and configuration for contextspine tests.

This module provides:
- A frozen clock (2020-07-15 17:00 UTC, noon in America/Chicago)
- A sample in-memory content store
- Dispatcher and resolver wired to that store
- Logging and settings isolation between tests

Usage:
    Fixtures are auto-discovered by pytest::

        @pytest.mark.asyncio
        async def test_something(resolver):
            ...
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Generator

import pytest
import structlog

from contextspine.core import timestamps
from contextspine.core.settings import clear_settings_cache
from contextspine.framework.dispatcher import QueryDispatcher
from contextspine.framework.resolver import ContextResolver
from contextspine.framework.sources.memory import MemoryContentStore

from _support.clock import FROZEN_NOW, TS_JUNE_20, TS_MAY_1, TS_TODAY, TS_YESTERDAY


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark all tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def frozen_clock(monkeypatch: pytest.MonkeyPatch) -> datetime:
    """Freeze ``utc_now`` so relative labels and timelines are deterministic."""
    monkeypatch.setattr(timestamps, "utc_now", lambda: FROZEN_NOW)
    return FROZEN_NOW


@pytest.fixture(autouse=True)
def isolated_logging_and_settings() -> Generator[None, None, None]:
    """
    Reset structlog and the settings cache after each test.

    CLI tests configure logging against the runner's temporary stderr,
    which is closed once the invocation returns.
    """
    clear_settings_cache()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    clear_settings_cache()


# =============================================================================
# Content Fixtures
# =============================================================================


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    """Small content set covering every store operation."""
    return [
        {"id": "n1", "type": "news", "TS": TS_TODAY, "title": "Opening", "featured": True},
        {"id": "n2", "type": "news", "TS": TS_YESTERDAY, "title": "Harbor"},
        {"id": "n3", "type": "news", "TS": TS_JUNE_20, "title": "Summer", "featured": True},
        {"id": "n4", "type": "news", "Data": {"TS": TS_MAY_1, "title": "Wrapped"}},
        {"id": "e1", "type": "event", "date": "2020-07-20T23:00:00.000Z", "title": "Concert"},
        {"id": "picks", "type": "list", "items": ["n3", "n1", "missing"]},
    ]


@pytest.fixture
def store(sample_records: list[dict[str, Any]]) -> MemoryContentStore:
    return MemoryContentStore(sample_records, seed=7)


@pytest.fixture
def dispatcher(store: MemoryContentStore) -> QueryDispatcher:
    return QueryDispatcher(store)


@pytest.fixture
def resolver(dispatcher: QueryDispatcher) -> ContextResolver:
    return ContextResolver(dispatcher)


@pytest.fixture
def context_dir(tmp_path: Path) -> Path:
    """Context directory with a global template and a ``home`` page."""
    pages = tmp_path / "pages"
    pages.mkdir()
    (tmp_path / "global.json").write_text(
        '{"site": {"_data": "Harbor Town"},'
        ' "latest": {"_query": "{cms}/list/news?limit=1", "_process": {"action": "Project", "fields": ["title"]}}}'
    )
    (pages / "home.yaml").write_text(
        "news:\n"
        "  _query: '{cms}/list/news?limit=10'\n"
        "  _process:\n"
        "    - action: Project\n"
        "      fields: [id]\n"
        "broken:\n"
        "  _query: '{cms}/get/nope'\n"
        "  _default: []\n"
    )
    return tmp_path
