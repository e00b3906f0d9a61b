"""
Overlay — PatchSet types and the override-on-collision merge.

A PatchSet maps a target path (relative to the runtime source root) to
an EditSet; an EditSet maps a literal anchor to its literal replacement.

Merge policy is shallow, last writer wins per file key: when an overlay
names a file the base already has, the overlay's EditSet replaces the
base EditSet whole.  Edits for one file are never unioned across layers.

Pure functions, no IO.
"""
from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple

EditSet = Dict[str, str]
PatchSet = Dict[str, EditSet]

NamedOverlay = Tuple[str, Mapping[str, Mapping[str, str]]]


def edit_set(*layers: Mapping[str, str]) -> EditSet:
    """Fresh EditSet from one or more read-only layers (later keys win)."""
    result: EditSet = {}
    for layer in layers:
        result.update(layer)
    return result


def merge_overlay(
    base: Mapping[str, Mapping[str, str]],
    overlay: Mapping[str, Mapping[str, str]],
) -> PatchSet:
    """
    Return a new PatchSet: *base* with every file in *overlay* replacing
    or adding its entry.  Neither input is modified.
    """
    merged: PatchSet = {path: dict(edits) for path, edits in base.items()}
    for path, edits in overlay.items():
        merged[path] = dict(edits)
    return merged


def merge_overlays(
    base: Mapping[str, Mapping[str, str]],
    overlays: Iterable[NamedOverlay],
) -> PatchSet:
    """Fold ``(name, fragment)`` overlays over *base* in order."""
    merged = merge_overlay(base, {})
    for _name, fragment in overlays:
        merged = merge_overlay(merged, fragment)
    return merged


def count_edits(patch_set: Mapping[str, Mapping[str, str]]) -> int:
    return sum(len(edits) for edits in patch_set.values())


def empty_files(patch_set: Mapping[str, Mapping[str, str]]) -> list:
    """Paths whose EditSet is empty — must always be ``[]`` for a built map."""
    return [path for path, edits in patch_set.items() if not edits]
