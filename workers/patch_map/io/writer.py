"""
Writer — convert patch maps to documents and serialize them to JSON.

Filesystem layout per target:
    <output_dir>/patch_map_report.json
    <output_dir>/patch_map.json
"""
import json
from pathlib import Path
from typing import Mapping

from patch_map.core.overlay import PatchSet
from patch_map.io.schema import (
    EditEntry,
    FileEdits,
    PatchMapDocument,
    PatchMapReport,
    TargetModel,
)


def to_document(
    patch_set: Mapping[str, Mapping[str, str]],
    target: TargetModel,
    profile_id: str,
) -> PatchMapDocument:
    return PatchMapDocument(
        profile_id=profile_id,
        target=target,
        files=[
            FileEdits(
                path=path,
                edits=[EditEntry(search=s, replace=r) for s, r in edits.items()],
            )
            for path, edits in patch_set.items()
        ],
    )


def document_to_patch_set(document: PatchMapDocument) -> PatchSet:
    return {
        f.path: {e.search: e.replace for e in f.edits}
        for f in document.files
    }


def load_document(path: Path) -> PatchMapDocument:
    return PatchMapDocument.model_validate_json(Path(path).read_text())


def write_outputs(
    report: PatchMapReport,
    document: PatchMapDocument,
    output_dir: Path,
) -> Path:
    """
    Write patch_map_report.json and patch_map.json into *output_dir*.

    Creates *output_dir* if it does not exist.
    Returns the output directory path.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    report_path = output_dir / "patch_map_report.json"
    map_path = output_dir / "patch_map.json"

    report_path.write_text(
        json.dumps(
            report.model_dump(mode="json"),
            indent=2,
            sort_keys=True,
        )
        + "\n"
    )

    # Keep map order for readable diffs; only the models' own keys are sorted.
    map_path.write_text(
        json.dumps(
            document.model_dump(mode="json"),
            indent=2,
            sort_keys=True,
        )
        + "\n"
    )

    return output_dir
