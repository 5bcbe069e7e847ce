"""Tests for the transform registry."""

import pytest

from contextspine.core.errors import UnknownTransformError
from contextspine.framework.registry import (
    TransformAction,
    get_transform,
    list_transforms,
    register_transform,
)


class TestRegistry:
    def test_every_action_has_an_implementation(self):
        assert list_transforms() == sorted(a.value for a in TransformAction)
        assert len(list_transforms()) == 15

    def test_lookup_by_string_and_enum(self):
        assert get_transform("Limit") is get_transform(TransformAction.LIMIT)
        assert get_transform("Limit").name == "Limit"

    def test_description_from_docstring(self):
        assert get_transform("Limit").description

    def test_unknown_transform(self):
        with pytest.raises(UnknownTransformError) as exc_info:
            get_transform("Shuffle")
        assert exc_info.value.transform_name == "Shuffle"
        assert "Limit" in exc_info.value.available

    def test_duplicate_registration_rejected(self):
        get_transform("Limit")
        with pytest.raises(ValueError, match="already registered"):

            @register_transform(TransformAction.LIMIT)
            def other_limit(value):
                return value

    def test_unknown_action_cannot_be_registered(self):
        with pytest.raises(ValueError):
            register_transform("Shuffle")

    def test_call_binds_params(self):
        assert get_transform("Limit")([1, 2, 3, 4], {"size": "2"}) == [1, 2]
