"""
Tests for contextspine.framework.params.

Tests cover:
- Type coercion of string inputs
- Alias resolution and defaults
- BadParamsError reporting
- Directive/caller parameter merging
"""

import pytest

from contextspine.core.errors import BadParamsError
from contextspine.framework.params import ParamDef, ParamSpec, merge_query_params


class TestParamDefCoerce:
    @pytest.mark.parametrize("value, expected", [("true", True), ("1", True), ("False", False), ("0", False), (True, True)])
    def test_bool(self, value, expected):
        assert ParamDef("flag", bool).coerce(value) is expected

    def test_int(self):
        p = ParamDef("size", int)
        assert p.coerce("5") == 5
        assert p.coerce(5.0) == 5
        with pytest.raises(ValueError):
            p.coerce("five")
        with pytest.raises(ValueError):
            p.coerce(True)

    def test_float(self):
        p = ParamDef("hoursOffset", float)
        assert p.coerce("-5.5") == -5.5
        assert p.coerce(3) == 3.0
        assert isinstance(p.coerce(3), float)
        with pytest.raises(ValueError):
            p.coerce("late")
        with pytest.raises(ValueError):
            p.coerce(False)

    def test_list_wraps_single_string(self):
        p = ParamDef("fields", list)
        assert p.coerce("title") == ["title"]
        assert p.coerce(("a", "b")) == ["a", "b"]
        with pytest.raises(ValueError):
            p.coerce(3)

    def test_choices(self):
        p = ParamDef("year", str, choices=("default", "always", "never"))
        assert p.coerce("always") == "always"
        with pytest.raises(ValueError):
            p.coerce("sometimes")

    def test_object_accepts_anything(self):
        assert ParamDef("default", object).coerce({"a": 1}) == {"a": 1}


class TestParamSpecBind:
    @pytest.fixture
    def spec(self):
        return ParamSpec(
            [
                ParamDef("input", list, default=["date", "TS"], aliases=("inputFields",)),
                ParamDef("size", int, default=10),
                ParamDef("dedupField", str, required=True),
            ]
        )

    def test_defaults_and_aliases(self, spec):
        bound = spec.bind({"inputFields": "publishUp", "dedupField": "id"})
        assert bound == {"input": ["publishUp"], "size": 10, "dedupField": "id"}

    def test_canonical_name_wins_over_alias(self, spec):
        bound = spec.bind({"input": ["a"], "inputFields": ["b"], "dedupField": "id"})
        assert bound["input"] == ["a"]

    def test_defaults_are_copied(self, spec):
        first = spec.bind({"dedupField": "id"})
        first["input"].append("mutated")
        assert spec.bind({"dedupField": "id"})["input"] == ["date", "TS"]

    def test_unknown_keys_ignored(self, spec):
        assert "other" not in spec.bind({"dedupField": "id", "other": 1})

    def test_explicit_none_uses_default_unless_nullable(self):
        spec = ParamSpec([ParamDef("size", int, default=10), ParamDef("default", object, default={}, nullable=True)])
        assert spec.bind({"size": None, "default": None}) == {"size": 10, "default": None}
        assert spec.bind({}) == {"size": 10, "default": {}}

    def test_missing_and_invalid(self, spec):
        with pytest.raises(BadParamsError) as exc_info:
            spec.bind({"size": "lots"})
        error = exc_info.value
        assert error.missing_params == ["dedupField"]
        assert error.invalid_params == ["size"]
        assert "Missing required parameters: dedupField" in str(error)

    def test_help_text(self, spec):
        text = spec.get_help_text()
        assert "input (list) [inputFields]" in text
        assert "dedupField (str) required" in text


class TestMergeQueryParams:
    def test_directive_limit_is_a_ceiling(self):
        assert merge_query_params({"limit": "10"}, {"limit": "3"})["limit"] == "3"
        assert merge_query_params({"limit": "10"}, {"limit": "20"})["limit"] == "10"

    def test_directive_wins_other_keys(self):
        merged = merge_query_params({"sort": "asc"}, {"sort": "desc", "page": "2"})
        assert merged == {"sort": "asc", "page": "2"}

    def test_limit_from_one_side_only(self):
        assert merge_query_params({}, {"limit": "3"})["limit"] == "3"
        assert merge_query_params({"limit": "4"}, None)["limit"] == "4"

    def test_non_numeric_limit_keeps_directive_value(self):
        assert merge_query_params({"limit": "10"}, {"limit": "all"})["limit"] == "10"

    def test_inputs_not_mutated(self):
        directive, caller = {"limit": "10"}, {"limit": "3"}
        merge_query_params(directive, caller)
        assert directive == {"limit": "10"}
        assert caller == {"limit": "3"}
