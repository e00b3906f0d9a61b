"""
OS family — resolve a free-form OS identifier into exactly one family tag.

Resolution happens once, at the boundary.  Downstream code switches on
the returned ``OSFamily`` and never re-matches the raw identifier, which
keeps the musl / MSYS / generic branches mutually exclusive.
"""
from __future__ import annotations

import logging
from enum import Enum, unique
from typing import Optional

from patch_map.policy.profile import Profile

logger = logging.getLogger(__name__)


@unique
class OSFamily(str, Enum):
    LINUX_MUSL = "linux-musl"
    MSYS_WINDOWS = "msys-windows"
    GENERIC_UNIX = "generic-unix"


def resolve_os_family(ostype: str, profile: Optional[Profile] = None) -> OSFamily:
    """
    Classify *ostype* (e.g. ``"linux-musl"``, ``"msys"``, ``"darwin21"``).

    The musl markers are tested before the MSYS markers.  Anything that
    matches neither, including an empty string, is ``GENERIC_UNIX``.
    """
    if profile is None:
        profile = Profile.v0()

    ostype = ostype or ""
    if any(marker in ostype for marker in profile.musl_markers):
        return OSFamily.LINUX_MUSL
    if any(marker in ostype for marker in profile.msys_markers):
        return OSFamily.MSYS_WINDOWS

    logger.debug("OS identifier %r resolved to %s", ostype, OSFamily.GENERIC_UNIX.value)
    return OSFamily.GENERIC_UNIX
