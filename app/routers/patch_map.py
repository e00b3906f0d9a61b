"""
Patch Map Router
Builds (and optionally applies) the Ruby source patch map for a target.

Runs the patch_map package for one OS identifier / Ruby version pair and
returns the map document plus its summary report.
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from app.config import settings
from patch_map.core.errors import ConfigurationError, PatchApplyError  # type: ignore
from patch_map.io.schema import PatchMapDocument, PatchMapReport  # type: ignore
from patch_map.runner import run_patch_map  # type: ignore

logger = logging.getLogger(__name__)


# Identifier and version become directory names under the output root.
_PATH_SEGMENT = r"^([A-Za-z0-9_+-][A-Za-z0-9_.+-]*)?$"
_VERSION_SEGMENT = r"^[0-9][0-9A-Za-z.+-]*$"


# =============================================================================
# Request/Response Models
# =============================================================================

class PatchMapBuildRequest(BaseModel):
    """Request to build a patch map."""
    ostype: str = Field(
        ...,
        description="Target OS identifier, e.g. linux-gnu, x86_64-linux-musl, msys",
        pattern=_PATH_SEGMENT,
    )
    runtime_version: str = Field(
        ...,
        description="Ruby version being packaged, e.g. 3.2.4",
        pattern=_VERSION_SEGMENT,
    )
    deps_lib_dir: Optional[str] = Field(
        None,
        description="Override the dependency library directory",
    )
    write_outputs: bool = Field(
        False,
        description="Write patch map JSON outputs to disk",
    )


class PatchMapApplyRequest(PatchMapBuildRequest):
    """Request to build a patch map and apply it to a source tree."""
    source_root: str = Field(
        ...,
        description="Ruby source tree to patch",
    )


class PatchMapResponse(BaseModel):
    report: PatchMapReport
    document: PatchMapDocument
    output_dir: Optional[str] = None


# =============================================================================
# Helpers
# =============================================================================

def _output_dir(request: PatchMapBuildRequest) -> Optional[Path]:
    if not request.write_outputs:
        return None
    # <root>/<ostype>/<version>/
    root = Path(settings.PATCH_MAP_OUTPUT_ROOT).resolve()
    out_dir = (root / request.ostype / request.runtime_version).resolve()
    if root not in out_dir.parents:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Output directory escapes {root}",
        )
    return out_dir


def _run(request: PatchMapBuildRequest, source_root: Optional[Path]) -> PatchMapResponse:
    out_dir = _output_dir(request)
    try:
        report, document = run_patch_map(
            ostype=request.ostype,
            deps_lib_dir=request.deps_lib_dir or settings.DEPS_LIB_DIR,
            runtime_version=request.runtime_version,
            source_root=source_root,
            output_dir=out_dir,
        )
    except ConfigurationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    except PatchApplyError as e:
        logger.error("Patch map apply failed on %s: %s", e.path, e)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"path": e.path, "anchor": e.anchor, "message": str(e)},
        )

    return PatchMapResponse(
        report=report,
        document=document,
        output_dir=str(out_dir) if out_dir else None,
    )


# =============================================================================
# Router
# =============================================================================

router = APIRouter()


@router.post(
    "/build",
    response_model=PatchMapResponse,
    status_code=status.HTTP_200_OK,
    summary="Build the patch map for an OS identifier and Ruby version",
)
async def build_patch_map_endpoint(request: PatchMapBuildRequest):
    """
    Select the patches for the requested target and return them as a
    file → edits document.  Nothing is applied.
    """
    return _run(request, source_root=None)


@router.post(
    "/apply",
    response_model=PatchMapResponse,
    status_code=status.HTTP_200_OK,
    summary="Build the patch map and apply it to a Ruby source tree",
)
async def apply_patch_map_endpoint(request: PatchMapApplyRequest):
    """
    Build the patch map and patch *source_root* in place.

    A missing file or anchor returns 409 and leaves the tree untouched.
    """
    root = Path(request.source_root)
    if not root.is_dir():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Source root not found: {root}",
        )
    return _run(request, source_root=root)
