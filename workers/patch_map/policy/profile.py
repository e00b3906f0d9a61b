"""
Profile — OS-family markers used to classify target identifiers.

The profile holds the substring markers so the core resolver carries
no opinions about which identifiers belong to which family.  Adding a
marker for a new toolchain triple is a profile change, not a code change.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Profile:
    """Immutable OS classification configuration."""

    # ── Identity ─────────────────────────────────────────────────────
    profile_id: str = "ruby-static-pass2-v0"

    # ── Family markers (substring match, checked in this order) ──────
    musl_markers: Tuple[str, ...] = ("linux-musl",)
    msys_markers: Tuple[str, ...] = ("msys", "cygwin")

    @classmethod
    def v0(cls) -> Profile:
        """Return the canonical v0 profile (all defaults)."""
        return cls()
