"""
Patch map runner — top-level orchestration: target → patch map + report.

Ties the builder, the optional source-tree applier, and IO together into
a single ``run_patch_map`` function that can be called from the API
endpoint or from a CLI.
"""
import logging
from pathlib import Path
from typing import Optional, Tuple

from patch_map.core.applier import apply_patch_set
from patch_map.core.builder import build_patch_map, select_overlays
from patch_map.core.os_family import resolve_os_family
from patch_map.core.overlay import count_edits
from patch_map.core.version import VersionLike, coerce_version
from patch_map.io.schema import PatchMapDocument, PatchMapReport, TargetModel
from patch_map.io.writer import to_document, write_outputs
from patch_map.policy.profile import Profile

logger = logging.getLogger(__name__)


def run_patch_map(
    ostype: str,
    deps_lib_dir: str,
    runtime_version: VersionLike,
    profile: Optional[Profile] = None,
    source_root: Optional[Path] = None,
    output_dir: Optional[Path] = None,
) -> Tuple[PatchMapReport, PatchMapDocument]:
    """
    Build the patch map for one target and optionally apply and persist it.

    Parameters
    ----------
    ostype : str
        OS identifier of the build target.
    deps_lib_dir : str
        Dependency library directory for the MAINLIBS flags.
    runtime_version : RuntimeVersion or str
        Ruby version being packaged.
    profile : Profile, optional
        OS family markers.  Defaults to Profile.v0().
    source_root : Path, optional
        Ruby source tree to patch.  If None, nothing is applied.
    output_dir : Path, optional
        Directory to write JSON outputs.  If None, outputs are not
        written to disk (useful for API responses).

    Returns
    -------
    (PatchMapReport, PatchMapDocument)

    Raises
    ------
    ConfigurationError
        *runtime_version* cannot be parsed.
    PatchApplyError
        Applying to *source_root* failed; no file was modified.
    """
    if profile is None:
        profile = Profile.v0()

    # ── Step 1: resolve target ───────────────────────────────────────
    version = coerce_version(runtime_version)
    family = resolve_os_family(ostype, profile)
    target = TargetModel(
        ostype=ostype,
        os_family=family.value,
        runtime_version=str(version),
        deps_lib_dir=str(deps_lib_dir),
    )

    # ── Step 2: build ────────────────────────────────────────────────
    patch_set = build_patch_map(ostype, deps_lib_dir, version, profile)
    overlays = [name for name, _ in select_overlays(family, version)]
    logger.info(
        "Built patch map for %s ruby %s: %d files, %d edits, overlays=%s",
        family.value, version, len(patch_set), count_edits(patch_set), overlays,
    )

    document = to_document(patch_set, target, profile.profile_id)
    report = PatchMapReport(
        profile_id=profile.profile_id,
        target=target,
        overlays=overlays,
        n_files=len(patch_set),
        n_edits=count_edits(patch_set),
    )

    # ── Step 3: apply ────────────────────────────────────────────────
    if source_root is not None:
        try:
            patched = apply_patch_set(Path(source_root), patch_set)
        except Exception:
            logger.error("Patching failed under %s", source_root, exc_info=True)
            raise
        report.source_root = str(source_root)
        report.patched_files = [p.relative_to(source_root).as_posix() for p in patched]

    # ── Step 4: write ────────────────────────────────────────────────
    if output_dir:
        write_outputs(report, document, Path(output_dir))

    return report, document
