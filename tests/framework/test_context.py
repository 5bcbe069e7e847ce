"""Tests for the page context builder."""

import pytest

from contextspine.core.errors import TemplateError, TemplateNotFoundError
from contextspine.framework.context import PageContextBuilder
from contextspine.framework.dispatcher import QueryDispatcher
from contextspine.framework.resolver import ContextResolver
from contextspine.framework.sources import MemoryContentStore


class CountingStore(MemoryContentStore):
    def __init__(self, records):
        super().__init__(records)
        self.calls = 0

    async def list_by_type(self, target, params):
        self.calls += 1
        return await super().list_by_type(target, params)

    async def get(self, target, params):
        self.calls += 1
        return await super().get(target, params)


@pytest.fixture
def builder(resolver, context_dir):
    return PageContextBuilder(resolver, context_dir)


class TestLoadTemplate:
    def test_yaml_page(self, builder):
        tree = builder.load_template("home")
        assert tree["news"]["_query"] == "{cms}/list/news?limit=10"

    def test_missing_page(self, builder):
        with pytest.raises(TemplateNotFoundError):
            builder.load_template("about")

    @pytest.mark.parametrize("name", ["../secrets", "home.json", "", "a//b"])
    def test_invalid_name(self, builder, name):
        with pytest.raises(TemplateError):
            builder.load_template(name)

    def test_nested_page(self, builder, context_dir):
        (context_dir / "pages" / "news").mkdir()
        (context_dir / "pages" / "news" / "index.json").write_text('{"title": {"_data": "News"}}')
        assert builder.load_template("news/index") == {"title": {"_data": "News"}}

    def test_unparseable_page(self, builder, context_dir):
        (context_dir / "pages" / "bad.json").write_text("{")
        with pytest.raises(TemplateError):
            builder.load_template("bad")

    def test_global_is_optional(self, resolver, tmp_path):
        assert PageContextBuilder(resolver, tmp_path).load_global() == {}


class TestPrepare:
    @pytest.mark.asyncio
    async def test_full_context(self, builder):
        ctx = await builder.prepare(
            "home",
            static_url="https://cdn.example.com",
            base_url="https://example.com",
            php_url="https://php.example.com",
            query={"page": "1"},
        )
        assert ctx["STATIC"] == "https://cdn.example.com"
        assert ctx["BASE"] == "https://example.com"
        assert ctx["PHP"] == "https://php.example.com"
        assert ctx["query"] == {"page": "1"}
        assert ctx["global"] == {"site": "Harbor Town", "latest": [{"title": "Opening"}]}
        # n4's payload has no id, so Project drops it
        assert ctx["page"] == {"news": [{"id": "n1"}, {"id": "n2"}, {"id": "n3"}], "broken": []}

    @pytest.mark.asyncio
    async def test_request_limit_applies_to_page_and_global(self, builder):
        ctx = await builder.prepare("home", query={"limit": "2"})
        assert ctx["page"]["news"] == [{"id": "n1"}, {"id": "n2"}]
        assert ctx["global"]["latest"] == [{"title": "Opening"}]

    @pytest.mark.asyncio
    async def test_missing_page(self, builder):
        with pytest.raises(TemplateNotFoundError):
            await builder.prepare("about")

    @pytest.mark.asyncio
    async def test_integer_keys_in_yaml(self, builder, context_dir):
        (context_dir / "pages" / "archive.yaml").write_text(
            "years:\n"
            "  2019:\n"
            "    _data: old\n"
            "  2020:\n"
            "    _query: '{cms}/get/n2'\n"
            "    _process: {action: Project, fields: [id]}\n"
        )
        ctx = await builder.prepare("archive")
        assert ctx["page"] == {"years": {2019: "old", 2020: {"id": "n2"}}}

    @pytest.mark.asyncio
    async def test_cycle_rejected_before_any_dispatch(self, sample_records, context_dir, monkeypatch):
        store = CountingStore(sample_records)
        builder = PageContextBuilder(ContextResolver(QueryDispatcher(store)), context_dir)
        tree = {"news": {"_query": "{cms}/list/news"}, "more": {}}
        tree["more"]["again"] = tree["more"]
        monkeypatch.setattr(builder, "load_template", lambda page: tree)
        with pytest.raises(TemplateError):
            await builder.prepare("home")
        assert store.calls == 0
