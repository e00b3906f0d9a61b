"""
Errors — exception hierarchy for patch map construction and application.
"""
from __future__ import annotations

from typing import Optional


class PatchMapError(Exception):
    """Base exception for patch_map failures."""


class ConfigurationError(PatchMapError, ValueError):
    """Invalid caller-supplied configuration (e.g. an unparseable runtime version)."""


class PatchApplyError(PatchMapError):
    """A patch could not be applied to a file in the runtime source tree."""

    def __init__(self, path: str, message: str, anchor: Optional[str] = None):
        self.path = path
        self.anchor = anchor
        super().__init__(f"Could not patch {path}: {message}")
