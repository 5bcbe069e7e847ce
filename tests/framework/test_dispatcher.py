"""
Tests for contextspine.framework.dispatcher.

Tests cover:
- Routing of every cms and gen action
- Target from the path or from params
- Caller param merging (limit ceiling)
- Dispatch errors and backend error wrapping
"""

import pytest

from contextspine.core.errors import (
    BackendError,
    MissingTargetError,
    ParseError,
    SourceNotFoundError,
    UnknownActionError,
    UnknownModuleError,
)
from contextspine.framework.dispatcher import QueryDispatcher
from contextspine.framework.sources import MemoryContentStore


def _ids(envelope):
    return [record["id"] for record in envelope["Items"]]


class ExplodingStore(MemoryContentStore):
    """Store whose ``get`` fails with a non-library exception."""

    async def get(self, target, params):
        raise RuntimeError("connection reset")


class TestRouting:
    def test_modules_and_actions(self, dispatcher):
        assert dispatcher.modules == ["cms", "gen"]
        assert dispatcher.actions("cms") == ["get", "list", "featured", "highlight", "random"]
        assert dispatcher.actions("gen") == ["timeline"]
        assert dispatcher.actions("nope") == []

    @pytest.mark.asyncio
    async def test_get(self, dispatcher):
        envelope = await dispatcher.execute("{cms}/get/n2")
        assert envelope["Item"]["id"] == "n2"

    @pytest.mark.asyncio
    async def test_list(self, dispatcher):
        assert _ids(await dispatcher.execute("{cms}/list/news?limit=2")) == ["n1", "n2"]

    @pytest.mark.asyncio
    async def test_featured(self, dispatcher):
        assert _ids(await dispatcher.execute("{cms}/featured/news")) == ["n1", "n3"]

    @pytest.mark.asyncio
    async def test_highlight(self, dispatcher):
        assert _ids(await dispatcher.execute("{cms}/highlight/picks")) == ["n3", "n1"]

    @pytest.mark.asyncio
    async def test_random(self, dispatcher):
        assert len((await dispatcher.execute("{cms}/random/news?limit=3"))["Items"]) == 3

    @pytest.mark.asyncio
    async def test_timeline(self, dispatcher):
        markers = await dispatcher.execute("{gen}/timeline/years?startDate=2019&endDate=2020")
        assert [m["ref"] for m in markers] == ["2019", "2020"]


class TestTargetAndParams:
    @pytest.mark.asyncio
    async def test_target_from_params(self, dispatcher):
        assert _ids(await dispatcher.execute("{cms}/list?target=news&limit=1")) == ["n1"]

    @pytest.mark.asyncio
    async def test_target_from_caller_params(self, dispatcher):
        envelope = await dispatcher.execute("{cms}/get", {"target": "n3"})
        assert envelope["Item"]["id"] == "n3"

    @pytest.mark.asyncio
    async def test_path_target_wins(self, dispatcher):
        envelope = await dispatcher.execute("{cms}/get/n1?target=n2")
        assert envelope["Item"]["id"] == "n1"

    @pytest.mark.asyncio
    async def test_caller_can_tighten_limit(self, dispatcher):
        assert _ids(await dispatcher.execute("{cms}/list/news?limit=3", {"limit": "1"})) == ["n1"]

    @pytest.mark.asyncio
    async def test_caller_cannot_raise_limit(self, dispatcher):
        assert len((await dispatcher.execute("{cms}/list/news?limit=2", {"limit": "50"}))["Items"]) == 2


class TestErrors:
    @pytest.mark.asyncio
    async def test_missing_target(self, dispatcher):
        with pytest.raises(MissingTargetError) as exc_info:
            await dispatcher.execute("{cms}/list?limit=2")
        assert exc_info.value.context.query == "{cms}/list?limit=2"

    @pytest.mark.asyncio
    async def test_unknown_module(self, dispatcher):
        with pytest.raises(UnknownModuleError):
            await dispatcher.execute("{shop}/get/x")

    @pytest.mark.asyncio
    async def test_unknown_action(self, dispatcher):
        with pytest.raises(UnknownActionError) as exc_info:
            await dispatcher.execute("{cms}/delete/n1")
        assert exc_info.value.context.action == "delete"

    @pytest.mark.asyncio
    async def test_parse_error(self, dispatcher):
        with pytest.raises(ParseError):
            await dispatcher.execute("cms/get/n1")

    @pytest.mark.asyncio
    async def test_store_errors_keep_type_and_gain_context(self, dispatcher):
        with pytest.raises(SourceNotFoundError) as exc_info:
            await dispatcher.execute("{cms}/get/nope")
        context = exc_info.value.context
        assert (context.module, context.action, context.target) == ("cms", "get", "nope")

    @pytest.mark.asyncio
    async def test_foreign_exceptions_wrapped(self, sample_records):
        dispatcher = QueryDispatcher(ExplodingStore(sample_records))
        with pytest.raises(BackendError) as exc_info:
            await dispatcher.execute("{cms}/get/n1")
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert exc_info.value.context.query == "{cms}/get/n1"
