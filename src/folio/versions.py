"""Semantic version ordering for release notes."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import cmp_to_key
from typing import Literal

from .models import ReleaseRecord

VersionChange = Literal["prerelease", "major", "minor", "patch"]

PRERELEASE_TOKENS = ("alpha", "beta", "rc", "pre")

# A prerelease token directly after the first hyphen, bounded by ".", "-",
# "+", a digit or end of string: 1.0.0-beta.1, 1.0.0-rc2, 1.0.0-pre
_PRERELEASE_STRICT = re.compile(
    r"^[^-]*-(?:%s)(?=$|[.\-+0-9])" % "|".join(PRERELEASE_TOKENS), re.IGNORECASE
)
_PRERELEASE_LEGACY = re.compile(r"-(?:%s)" % "|".join(PRERELEASE_TOKENS), re.IGNORECASE)


def parse_version(version: str) -> tuple[int, int, int]:
    """Parse "v1.2.3" (prefix and suffix optional) into (major, minor, patch).

    Missing or non-numeric components count as 0.
    """
    core = version.strip()
    if core[:1] in ("v", "V"):
        core = core[1:]
    core = re.split(r"[-+]", core, maxsplit=1)[0]

    parts: list[int] = []
    for piece in core.split(".")[:3]:
        match = re.match(r"\d+", piece)
        parts.append(int(match.group()) if match else 0)
    while len(parts) < 3:
        parts.append(0)
    return parts[0], parts[1], parts[2]


def compare_versions(a: str, b: str) -> int:
    """Compare two versions numerically. Returns -1, 0 or 1."""
    left, right = parse_version(a), parse_version(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def sort_versions(versions: Iterable[str], descending: bool = True) -> list[str]:
    """Sort version strings, newest first by default.

    The sort is stable: equal versions keep their input order.
    """
    key = cmp_to_key(compare_versions)
    return sorted(versions, key=key, reverse=descending)


def is_prerelease(version: str, *, strict: bool = True) -> bool:
    """Check whether a version carries an alpha/beta/rc/pre suffix.

    strict=True requires the token to stand alone after the hyphen, so
    "1.0.0-preview-build" is not a prerelease. strict=False keeps the older
    substring behaviour where any "-pre..." counts.
    """
    pattern = _PRERELEASE_STRICT if strict else _PRERELEASE_LEGACY
    return pattern.search(version) is not None


def classify_version_change(version: str) -> VersionChange:
    """Classify a release as prerelease, major (x.0.0), minor (x.y.0) or patch."""
    if is_prerelease(version):
        return "prerelease"

    _major, minor, patch = parse_version(version)
    if minor == 0 and patch == 0:
        return "major"
    if patch == 0:
        return "minor"
    return "patch"


def release_is_prerelease(release: ReleaseRecord) -> bool:
    """Honour an explicit ``prerelease`` front matter flag, else infer from the version."""
    if release.prerelease is not None:
        return release.prerelease
    return is_prerelease(release.version)


def sort_releases(
    releases: Sequence[ReleaseRecord],
    order: Literal["asc", "desc"] = "desc",
) -> list[ReleaseRecord]:
    """Order release records by version (stable for equal versions)."""
    key = cmp_to_key(lambda a, b: compare_versions(a.version, b.version))
    return sorted(releases, key=key, reverse=(order == "desc"))
