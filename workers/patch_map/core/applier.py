"""
Applier — apply a PatchSet to a runtime source tree.

Each edit is a literal (non-regex) substitution of the first occurrence
of its anchor.  A missing file or a missing anchor is fatal for the run.

Two-phase: every file is read and patched in memory first, and nothing
is written unless all files and anchors validated.  Before the first
write a pristine copy is kept as ``<file>.old``; later runs start from
that copy, so re-applying a map never stacks patches.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping

from patch_map.core.errors import PatchApplyError

logger = logging.getLogger(__name__)

PRISTINE_SUFFIX = ".old"


def pristine_path(path: Path) -> Path:
    return path.with_name(path.name + PRISTINE_SUFFIX)


def patch_text(rel_path: str, text: str, edits: Mapping[str, str]) -> str:
    """Apply *edits* to *text*; raise PatchApplyError on the first absent anchor."""
    for anchor, replacement in edits.items():
        if anchor not in text:
            raise PatchApplyError(rel_path, f"anchor not found: {anchor[:80]!r}", anchor=anchor)
        text = text.replace(anchor, replacement, 1)
    return text


def _read_pristine(rel_path: str, path: Path) -> str:
    if not path.is_file():
        raise PatchApplyError(rel_path, "file does not exist")
    source = pristine_path(path)
    if not source.is_file():
        source = path
    # newline="" keeps CRLF sources byte-for-byte
    with source.open(encoding="utf-8", errors="surrogateescape", newline="") as f:
        return f.read()


def _write_atomic(path: Path, text: str) -> None:
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(text, encoding="utf-8", errors="surrogateescape", newline="")
    os.replace(tmp, path)


def apply_patch_set(
    source_root: Path,
    patch_set: Mapping[str, Mapping[str, str]],
) -> List[Path]:
    """
    Patch every file of *patch_set* under *source_root*.

    Returns the list of patched paths in map order.

    Raises
    ------
    PatchApplyError
        A target file is missing or one of its anchors is absent.  The
        tree is left untouched in that case.
    """
    source_root = Path(source_root)

    # ── Phase 1: stage everything in memory ──────────────────────────
    staged: Dict[Path, str] = {}
    originals: Dict[Path, str] = {}
    for rel_path, edits in patch_set.items():
        path = source_root / rel_path
        original = _read_pristine(rel_path, path)
        staged[path] = patch_text(rel_path, original, edits)
        originals[path] = original

    # ── Phase 2: write ───────────────────────────────────────────────
    patched: List[Path] = []
    for path, text in staged.items():
        backup = pristine_path(path)
        if not backup.exists():
            backup.write_text(originals[path], encoding="utf-8", errors="surrogateescape", newline="")
        logger.info("Patching %s", path)
        _write_atomic(path, text)
        patched.append(path)

    return patched
