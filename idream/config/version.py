"""
==============================================================================
Application Version Parsing Module
==============================================================================

Best-effort parser for application version strings.

Expected Format:
---------------
    <major>.<minor>.<build>-<release>

    major, minor, build: decimal digit sequences
    release:             one of alpha, beta, build, testing

Examples:
--------
    "2.5.10-testing"  -> VersionInfo(major=2, minor=5, build=10, release="testing")
    "1.2.3"           -> VersionInfo()  (no release label, nothing matched)

Parsing never raises. A string that does not contain the pattern yields an
all-zero VersionInfo with ``matched=False`` so callers can tell an absent
version apart from a literal ``0.0.0``.

==============================================================================
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ConfigDict


RELEASE_LABELS = ("alpha", "beta", "build", "testing")

VERSION_PATTERN = re.compile(
    r"(?P<major>\d+)\.(?P<minor>\d+)\.(?P<build>\d+)-(?P<release>{})".format(
        "|".join(RELEASE_LABELS)
    ),
    re.ASCII,
)

# Components are unsigned 64-bit; larger values degrade to zero.
_UINT64_MAX = 2 ** 64 - 1


class VersionInfo(BaseModel):
    """
    Parsed application version.

    Attributes:
        major: Major version number
        minor: Minor version number
        build: Build number
        release: Release label, empty when not recognized
        matched: True if the source string matched the version pattern
    """

    model_config = ConfigDict(frozen=True)

    major: int = 0
    minor: int = 0
    build: int = 0
    release: str = ""
    matched: bool = False

    def __str__(self) -> str:
        if not self.matched:
            return ""
        return f"{self.major}.{self.minor}.{self.build}-{self.release}"


def _to_uint(digits: str) -> int:
    value = int(digits)
    return value if value <= _UINT64_MAX else 0


def parse_version(value: Any) -> VersionInfo:
    """
    Parse a version string into its components.

    The pattern is searched anywhere in the string, so a prefix such as
    ``"v"`` or trailing build metadata does not prevent a match.

    Args:
        value: Version string to parse

    Returns:
        VersionInfo, zero-valued when the string does not match
    """
    if not isinstance(value, str):
        return VersionInfo()

    match = VERSION_PATTERN.search(value)
    if match is None:
        return VersionInfo()

    return VersionInfo(
        major=_to_uint(match.group("major")),
        minor=_to_uint(match.group("minor")),
        build=_to_uint(match.group("build")),
        release=match.group("release"),
        matched=True,
    )
