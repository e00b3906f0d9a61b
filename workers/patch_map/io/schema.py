"""
Schema — Pydantic models for patch map JSON outputs.

Two outputs per target:
  1. patch_map.json        — the full file → edits document.
  2. patch_map_report.json — family, overlays, counts.

Runtime contract fields (present in every output):
  package_name, patch_map_version, profile_id, schema_version.
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from patch_map import PACKAGE_NAME, PATCH_MAP_VERSION, SCHEMA_VERSION


# ── Target description ───────────────────────────────────────────────────────

class TargetModel(BaseModel):
    ostype: str
    os_family: str           # linux-musl | msys-windows | generic-unix
    runtime_version: str
    deps_lib_dir: str


# ── Patch map document ───────────────────────────────────────────────────────

class EditEntry(BaseModel):
    """One literal search → replace pair."""
    search: str
    replace: str


class FileEdits(BaseModel):
    path: str                # relative to the runtime source root
    edits: List[EditEntry] = Field(min_length=1)


class PatchMapDocument(BaseModel):
    """Wrapper for patch_map.json."""

    package_name: str = PACKAGE_NAME
    patch_map_version: str = PATCH_MAP_VERSION
    schema_version: str = SCHEMA_VERSION
    profile_id: str

    target: TargetModel
    files: List[FileEdits] = Field(default_factory=list)


# ── Report ───────────────────────────────────────────────────────────────────

class PatchMapReport(BaseModel):
    """Target-level summary — patch_map_report.json."""

    package_name: str = PACKAGE_NAME
    patch_map_version: str = PATCH_MAP_VERSION
    schema_version: str = SCHEMA_VERSION
    profile_id: str

    target: TargetModel
    overlays: List[str] = Field(default_factory=list)
    n_files: int = 0
    n_edits: int = 0

    # Populated only when the map was applied to a source tree
    source_root: Optional[str] = None
    patched_files: List[str] = Field(default_factory=list)

    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
