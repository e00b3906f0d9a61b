"""
Tests for patch_map.core.applier — literal substitution on a source tree.
"""
import pytest

from patch_map.core.applier import apply_patch_set, patch_text, pristine_path
from patch_map.core.builder import build_patch_map
from patch_map.core.errors import PatchApplyError

from patch_map.tests.conftest import DEPS_LIB_DIR


class TestPatchText:

    def test_literal_not_regex(self):
        assert patch_text("f", "a.*b a.*b", {"a.*b": "X"}) == "X a.*b"

    def test_missing_anchor_raises_with_file(self):
        with pytest.raises(PatchApplyError) as exc:
            patch_text("dir.c", "nothing here", {"#ifdef HAVE_GETATTRLIST": "x"})
        assert exc.value.path == "dir.c"
        assert exc.value.anchor == "#ifdef HAVE_GETATTRLIST"
        assert "dir.c" in str(exc.value)


class TestApplyPatchSet:

    @pytest.mark.parametrize("ostype", ["linux-gnu", "linux-musl", "msys"])
    def test_full_map_applies(self, ostype, source_tree_factory):
        ps = build_patch_map(ostype, DEPS_LIB_DIR, "3.2.0")
        root = source_tree_factory(ps)

        patched = apply_patch_set(root, ps)

        assert [p.relative_to(root).as_posix() for p in patched] == list(ps)
        for rel_path, edits in ps.items():
            text = (root / rel_path).read_text()
            for replacement in edits.values():
                assert replacement in text
            assert pristine_path(root / rel_path).exists()

    def test_reapply_starts_from_pristine(self, source_tree_factory):
        ps = build_patch_map("linux-gnu", DEPS_LIB_DIR, "3.1.0")
        root = source_tree_factory(ps)

        apply_patch_set(root, ps)
        once = (root / "main.c").read_text()
        apply_patch_set(root, ps)

        assert (root / "main.c").read_text() == once

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(PatchApplyError) as exc:
            apply_patch_set(tmp_path, {"io.c": {"anchor": "x"}})
        assert exc.value.path == "io.c"

    def test_missing_anchor_leaves_tree_untouched(self, source_tree_factory):
        ps = build_patch_map("linux-gnu", DEPS_LIB_DIR, "3.1.0")
        root = source_tree_factory(ps)
        before = {p: (root / p).read_text() for p in ps}

        # Break the last file so earlier files would have been patched first
        last = list(ps)[-1]
        (root / last).write_text("no anchors\n")
        before[last] = "no anchors\n"

        with pytest.raises(PatchApplyError) as exc:
            apply_patch_set(root, ps)

        assert exc.value.path == last
        for p, text in before.items():
            assert (root / p).read_text() == text
            assert not pristine_path(root / p).exists()

    def test_crlf_line_endings_preserved(self, tmp_path):
        original = b"#include <stdio.h>\r\n/* define system APIs */\r\nint x;\r\n"
        (tmp_path / "io.c").write_bytes(original)

        apply_patch_set(tmp_path, {"io.c": {"int x;": "int y;"}})

        assert (tmp_path / "io.c").read_bytes() == original.replace(b"int x;", b"int y;")
        assert pristine_path(tmp_path / "io.c").read_bytes() == original
