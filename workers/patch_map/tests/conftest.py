"""
Shared pytest fixtures for patch_map tests.

All fixtures are pure-Python — no Ruby sources, no compiler.  Source
trees for the applier are synthesized from the patch map's own anchors.
"""
from pathlib import Path
from typing import Mapping

import pytest

DEPS_LIB_DIR = "/opt/staticpack/deps/lib"

# Representative identifiers per family
MUSL_OSTYPES = ["linux-musl", "x86_64-linux-musl", "aarch64-alpine-linux-musl"]
MSYS_OSTYPES = ["msys", "x86_64-pc-msys", "cygwin"]
GENERIC_OSTYPES = ["linux-gnu", "x86_64-linux-gnu", "darwin22", "freebsd13", ""]

VERSIONS = ["2.6.0", "2.7.8", "3.0.6", "3.1.0", "3.1.5", "3.2.0", "3.2.4", "3.3.0", "3.4.1"]


@pytest.fixture
def deps_lib_dir() -> str:
    return DEPS_LIB_DIR


def write_source_tree(root: Path, patch_set: Mapping[str, Mapping[str, str]]) -> Path:
    """Create one file per target containing every anchor, separated by filler lines."""
    for rel_path, edits in patch_set.items():
        path = root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        body = ["/* synthesized */"]
        for anchor in edits:
            body.append(anchor)
            body.append("/* filler */")
        path.write_text("\n".join(body) + "\n")
    return root


@pytest.fixture
def source_tree_factory(tmp_path):
    """Return a callable that writes a matching source tree for a patch set."""
    def _factory(patch_set):
        return write_source_tree(tmp_path / "ruby-src", patch_set)
    return _factory
