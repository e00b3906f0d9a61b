"""
Tests for patch_map.core.overlay — shallow override merge.
"""
from types import MappingProxyType

from patch_map.core.overlay import (
    count_edits,
    edit_set,
    empty_files,
    merge_overlay,
    merge_overlays,
)


class TestMergeOverlay:

    def test_new_file_added(self):
        merged = merge_overlay({"a.c": {"x": "1"}}, {"b.c": {"y": "2"}})
        assert merged == {"a.c": {"x": "1"}, "b.c": {"y": "2"}}

    def test_collision_replaces_whole_edit_set(self):
        """No key-level union: the base edits for a.c are gone."""
        base = {"a.c": {"x": "1", "z": "3"}}
        merged = merge_overlay(base, {"a.c": {"y": "2"}})
        assert merged == {"a.c": {"y": "2"}}

    def test_inputs_not_mutated(self):
        base = {"a.c": {"x": "1"}}
        overlay = {"a.c": {"y": "2"}, "b.c": {"w": "4"}}
        merged = merge_overlay(base, overlay)
        merged["a.c"]["extra"] = "!"
        assert base == {"a.c": {"x": "1"}}
        assert overlay == {"a.c": {"y": "2"}, "b.c": {"w": "4"}}

    def test_empty_overlay_is_identity(self):
        base = {"a.c": {"x": "1"}}
        assert merge_overlay(base, {}) == base

    def test_accepts_read_only_layers(self):
        overlay = {"a.c": MappingProxyType({"x": "1"})}
        merged = merge_overlay({}, overlay)
        assert isinstance(merged["a.c"], dict)


class TestMergeOverlays:

    def test_last_writer_wins(self):
        merged = merge_overlays(
            {"a.c": {"x": "base"}},
            [("first", {"a.c": {"x": "first"}}), ("second", {"a.c": {"x": "second"}})],
        )
        assert merged == {"a.c": {"x": "second"}}

    def test_no_overlays(self):
        assert merge_overlays({"a.c": {"x": "1"}}, []) == {"a.c": {"x": "1"}}


class TestHelpers:

    def test_edit_set_later_layer_wins(self):
        assert edit_set({"k": "a"}, {"k": "b", "j": "c"}) == {"k": "b", "j": "c"}

    def test_edit_set_returns_fresh_dict(self):
        layer = MappingProxyType({"k": "v"})
        fresh = edit_set(layer)
        fresh["k"] = "changed"
        assert layer["k"] == "v"

    def test_count_and_empty(self):
        ps = {"a.c": {"x": "1", "y": "2"}, "b.c": {}}
        assert count_edits(ps) == 2
        assert empty_files(ps) == ["b.c"]
