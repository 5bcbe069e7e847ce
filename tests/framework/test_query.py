"""Tests for contextspine.framework.query (directive parsing)."""

import pytest

from contextspine.core.errors import ParseError
from contextspine.framework.query import ParsedQuery, parse_query, split_params


class TestParseQuery:
    def test_full_directive(self):
        query = parse_query("{cms}/get/foo?limit=5&flag")
        assert query == ParsedQuery(module="cms", action="get", target="foo", params={"limit": "5", "flag": None})

    def test_without_target_or_params(self):
        query = parse_query("{gen}/timeline")
        assert query.module == "gen"
        assert query.action == "timeline"
        assert query.target is None
        assert query.params == {}

    def test_params_without_target(self):
        query = parse_query("{cms}/list?target=news&limit=3")
        assert query.target is None
        assert query.params == {"target": "news", "limit": "3"}

    def test_target_may_contain_dashes_and_dots(self):
        assert parse_query("{cms}/get/home-page.v2").target == "home-page.v2"

    def test_params_keep_declaration_order(self):
        query = parse_query("{cms}/list/news?b=2&a=1&c")
        assert list(query.params) == ["b", "a", "c"]

    def test_to_dict(self):
        assert parse_query("{cms}/list/news?limit=2").to_dict() == {
            "module": "cms",
            "action": "list",
            "target": "news",
            "params": {"limit": "2"},
        }

    @pytest.mark.parametrize(
        "text",
        [
            "cms/get/foo",
            "{cms/get/foo",
            "{cms}/get/foo/bar",
            "{cms}",
            "{cms}/",
            "{c-ms}/get",
            "",
            "   ",
            None,
            42,
        ],
    )
    def test_malformed(self, text):
        with pytest.raises(ParseError):
            parse_query(text)

    def test_error_carries_query(self):
        with pytest.raises(ParseError) as exc_info:
            parse_query("cms/get")
        assert exc_info.value.context.query == "cms/get"


class TestSplitParams:
    def test_trims_and_skips_empty(self):
        assert split_params(" a = 1 && b ") == {"a": "1", "b": None}

    def test_value_is_everything_after_first_equals(self):
        assert split_params("q=a=b") == {"q": "a=b"}

    def test_empty_value_is_empty_string(self):
        assert split_params("a=") == {"a": ""}

    def test_none(self):
        assert split_params(None) == {}
