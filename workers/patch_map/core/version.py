"""
Version — runtime version parsing and the predicates patch selection uses.

Only (major, minor) ordering is consulted; the patch level is parsed and
kept but never drives a decision.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from patch_map.core.errors import ConfigurationError

# "3.2", "3.2.1", "3.3.0-preview1".  A pre-release suffix needs a patch level and is ignored.
_VERSION_RE = re.compile(r"^\s*(\d+)\.(\d+)(?:\.(\d+)(?:-[0-9A-Za-z][0-9A-Za-z.]*)?)?\s*$")


@dataclass(frozen=True, order=True)
class RuntimeVersion:
    """Comparable (major, minor, patch) triple."""

    major: int
    minor: int
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "RuntimeVersion":
        """Parse ``"X.Y"`` or ``"X.Y.Z"``; anything else is a ConfigurationError."""
        if not isinstance(text, str):
            raise ConfigurationError(f"Runtime version must be a string, got {type(text).__name__}")
        m = _VERSION_RE.match(text)
        if m is None:
            raise ConfigurationError(f"Invalid runtime version: {text!r}")
        return cls(int(m.group(1)), int(m.group(2)), int(m.group(3) or 0))

    @property
    def series(self) -> tuple:
        return (self.major, self.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


VersionLike = Union[RuntimeVersion, str]


def coerce_version(version: VersionLike) -> RuntimeVersion:
    if isinstance(version, RuntimeVersion):
        return version
    return RuntimeVersion.parse(version)


def is_version_3x(version: VersionLike) -> bool:
    """Any 3.x release; 2.x and 4.x are not."""
    return coerce_version(version).major == 3


def is_version_31_or_above(version: VersionLike) -> bool:
    return coerce_version(version).series >= (3, 1)


def is_version_32_exact(version: VersionLike) -> bool:
    """3.2.x only — the one series whose MAINLIBS line carries $(YJIT_LIBS)."""
    return coerce_version(version).series == (3, 2)


def is_version_32_or_above(version: VersionLike) -> bool:
    return coerce_version(version).series >= (3, 2)
