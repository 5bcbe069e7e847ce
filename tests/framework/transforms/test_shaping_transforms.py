"""Tests for Project, FirstItem and NormalizeImages."""

import pytest

from contextspine.framework.pipeline import run_pipeline


class TestProject:
    @pytest.fixture
    def records(self):
        return [
            {"id": 1, "title": "One", "images": {"hero": {"url": "1.jpg", "width": 10}}},
            {"id": 2, "body": "no title"},
            {"body": "nothing to keep"},
        ]

    def test_keeps_fields_and_drops_empty(self, records):
        result = run_pipeline(records, {"action": "Project", "fields": ["id", "title"]})
        assert result == [{"id": 1, "title": "One"}, {"id": 2}]

    def test_nested_paths(self, records):
        result = run_pipeline(records, {"action": "Project", "fields": ["images.hero.url"]})
        assert result == [{"images": {"hero": {"url": "1.jpg"}}}]

    def test_keep_empty(self, records):
        result = run_pipeline(records, {"action": "Project", "fields": ["id"], "removeEmpty": "false"})
        assert result == [{"id": 1}, {"id": 2}, {}]

    def test_idempotent(self, records):
        process = {"action": "Project", "fields": ["id", "title"]}
        once = run_pipeline(records, process)
        assert run_pipeline(once, process) == once

    def test_result_is_a_copy(self, records):
        [first] = run_pipeline(records[:1], {"action": "Project", "fields": ["images"]})
        first["images"]["hero"]["url"] = "changed"
        assert records[0]["images"]["hero"]["url"] == "1.jpg"

    def test_single_record(self):
        assert run_pipeline({"id": 1, "x": 2}, {"action": "Project", "fields": ["id"]}) == {"id": 1}
        assert run_pipeline({"x": 2}, {"action": "Project", "fields": ["id"]}) == {}


class TestFirstItem:
    def test_first(self):
        assert run_pipeline([{"id": 1}, {"id": 2}], "FirstItem") == {"id": 1}

    def test_empty_uses_default(self):
        assert run_pipeline([], "FirstItem") == {}
        assert run_pipeline([], {"action": "FirstItem", "default": None}) is None
        assert run_pipeline([], {"action": "FirstItem", "default": "none"}) == "none"

    def test_non_list_passes_through(self):
        assert run_pipeline({"id": 1}, "FirstItem") == {"id": 1}


class TestNormalizeImages:
    def test_image_node(self):
        record = {"image": {"url": "a.jpg", "width": 100, "height": 50, "link": "https://example.com"}}
        result = run_pipeline(record, "NormalizeImages")
        assert result["heroImage"] == {"url": "a.jpg", "width": 100, "height": 50}
        assert result["heroLink"] == "https://example.com"
        assert result["thumbImage"] == {"url": "a.jpg", "width": 100, "height": 50}

    def test_hero_and_thumb_layout(self):
        record = {"images": {"hero": {"url": "h.jpg", "thumb": {"url": "t.jpg", "width": 10}}}}
        [result] = run_pipeline([record], "NormalizeImages")
        assert result["heroImage"] == {"url": "h.jpg"}
        assert result["thumbImage"] == {"url": "t.jpg", "width": 10}
        assert "heroLink" not in result

    def test_plain_url(self):
        result = run_pipeline({"image": "plain.jpg"}, "NormalizeImages")
        assert result["heroImage"] == {"url": "plain.jpg"}
        assert result["thumbImage"] == {"url": "plain.jpg"}

    def test_existing_fields_kept(self):
        record = {"heroImage": {"url": "keep.jpg"}, "image": "other.jpg"}
        assert run_pipeline(record, "NormalizeImages")["heroImage"] == {"url": "keep.jpg"}

    def test_selected_fields(self):
        result = run_pipeline({"image": "a.jpg"}, {"action": "NormalizeImages", "fields": ["thumbImage"]})
        assert result == {"image": "a.jpg", "thumbImage": {"url": "a.jpg"}}
