"""SDK version-change analysis.

Classifies the jump between two version strings so callers can flag
upgrades that are likely to carry breaking prop changes.  Never raises:
versions that do not parse produce an ``unparseable`` result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class VersionChangeType(StrEnum):
    NONE = "none"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRERELEASE = "prerelease"
    DOWNGRADE = "downgrade"
    UNPARSEABLE = "unparseable"


_VERSION_RE = re.compile(
    r"^v?(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?(?:-(?P<pre>[0-9A-Za-z.-]+))?$"
)


@dataclass(frozen=True, slots=True)
class ParsedVersion:
    major: int
    minor: int
    patch: int
    prerelease: str | None = None

    @classmethod
    def parse(cls, text: str | None) -> ParsedVersion | None:
        if not text:
            return None
        match = _VERSION_RE.match(text.strip())
        if match is None:
            return None
        return cls(
            major=int(match["major"]),
            minor=int(match["minor"]),
            patch=int(match["patch"] or 0),
            prerelease=match["pre"],
        )

    @property
    def release(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)


@dataclass(frozen=True, slots=True)
class VersionChange:
    previous: str | None
    current: str | None
    change_type: VersionChangeType
    potentially_breaking: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "previous": self.previous,
            "current": self.current,
            "change_type": self.change_type.value,
            "potentially_breaking": self.potentially_breaking,
        }


def analyze_version_change(previous: str | None, current: str | None) -> VersionChange:
    """Classify the move from ``previous`` to ``current``.

    Major bumps, minor bumps below 1.0, downgrades and anything unparseable
    are reported as potentially breaking.
    """

    def result(change_type: VersionChangeType, breaking: bool) -> VersionChange:
        return VersionChange(previous, current, change_type, breaking)

    if previous == current:
        return result(VersionChangeType.NONE, False)

    old = ParsedVersion.parse(previous)
    new = ParsedVersion.parse(current)
    if old is None or new is None:
        return result(VersionChangeType.UNPARSEABLE, True)

    if new.release < old.release:
        return result(VersionChangeType.DOWNGRADE, True)
    if new.major != old.major:
        return result(VersionChangeType.MAJOR, True)
    if new.minor != old.minor:
        # 0.x minor bumps are allowed to break under semver
        return result(VersionChangeType.MINOR, new.major == 0)
    if new.patch != old.patch:
        return result(VersionChangeType.PATCH, False)

    # Same release triple: only the prerelease tag moved
    if old.prerelease is None and new.prerelease is not None:
        return result(VersionChangeType.DOWNGRADE, True)
    if old.prerelease == new.prerelease:
        return result(VersionChangeType.NONE, False)
    return result(VersionChangeType.PRERELEASE, True)
