"""
Version helpers for pinbump.

Two different notions of "version" live here:

- :func:`compare_semver` and the release-tag helpers order plain
  ``MAJOR.MINOR.PATCH`` strings numerically and never raise, whatever the
  input looks like. Release tags are selected with these.
- :func:`get_update_type` classifies a before/after pair using PEP 440
  parsing from ``packaging``. It only labels changes for display.
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from typing import Iterable, List, Optional, Tuple

from packaging.version import InvalidVersion, Version, parse

from pinbump.constants import DATE_TAG_PATTERN, RELEASE_TAG_PATTERN

_COMPONENT_RE = re.compile(r"[+-]?[0-9]+")

#: Number of dot-separated components that take part in a comparison.
SEMVER_COMPONENTS = 3


# ---------------------------------------------------------------------------
# Lenient SemVer ordering
# ---------------------------------------------------------------------------


def _to_number(component: str) -> Optional[float]:
    """Convert one version component, or return ``None`` if it is not a number.

    Surrounding whitespace is ignored and an empty component counts as zero.
    Components too long for ``int()`` become signed infinity.
    """
    text = component.strip()
    if not text:
        return 0
    if not _COMPONENT_RE.fullmatch(text):
        return None
    try:
        return int(text)
    except ValueError:
        return float("-inf") if text.startswith("-") else float("inf")


def _components(version: str) -> List[Optional[float]]:
    parts = [_to_number(part) for part in version.split(".")[:SEMVER_COMPONENTS]]
    # Missing components compare like non-numeric ones
    parts.extend([None] * (SEMVER_COMPONENTS - len(parts)))
    return parts


def compare_semver(a: str, b: str) -> int:
    """Compare two ``MAJOR.MINOR.PATCH`` strings numerically.

    Components are compared left to right and the first difference decides.
    Leading zeros do not matter (``"01"`` is ``1``) and ``"1.2.10"`` sorts
    after ``"1.2.2"``. Components beyond the third are ignored.

    A component that is missing or not a number is neither greater nor less
    than the other side, so that position is skipped. As a consequence
    ``"1.x.0"`` and ``"1.5.0"`` compare equal.

    Args:
        a: First version string.
        b: Second version string.

    Returns:
        ``-1`` if ``a < b``, ``1`` if ``a > b``, ``0`` otherwise.

    Examples:
        >>> compare_semver("1.2.10", "1.2.2")
        1
        >>> compare_semver("01.1.1", "1.1.1")
        0
        >>> compare_semver("1.01.1", "1.1.2")
        -1
    """
    for left, right in zip(_components(a), _components(b)):
        if left is None or right is None:
            continue
        if left > right:
            return 1
        if left < right:
            return -1
    return 0


#: Sort key for ``sorted(..., key=semver_key)``.
semver_key = cmp_to_key(compare_semver)


# ---------------------------------------------------------------------------
# Release tags
# ---------------------------------------------------------------------------


def is_release_tag(tag: str) -> bool:
    """Return True for ``X.Y.Z`` tags that are not date-like (``2020.01.01``)."""
    return bool(re.match(RELEASE_TAG_PATTERN, tag)) and not re.match(
        DATE_TAG_PATTERN, tag
    )


def sort_release_tags(tags: Iterable[str], *, newest_first: bool = True) -> List[str]:
    """Return the release tags among ``tags``, ordered with :func:`compare_semver`."""
    return sorted(
        (tag for tag in tags if is_release_tag(tag)),
        key=semver_key,
        reverse=newest_first,
    )


def latest_release_tag(tags: Iterable[str]) -> Optional[str]:
    """Return the newest release tag, or ``None`` if there is none.

    Examples:
        >>> latest_release_tag(["3.1.0", "4.0.0", "2023.01.05", "4.0.0rc1"])
        '4.0.0'
    """
    ordered = sort_release_tags(tags)
    return ordered[0] if ordered else None


def is_latest_release(release: str, latest: Optional[str]) -> bool:
    """Return True if ``release`` is at least as new as ``latest``."""
    if latest is None:
        return True
    return compare_semver(release, latest) >= 0


# ---------------------------------------------------------------------------
# Change classification
# ---------------------------------------------------------------------------


def get_update_type(
    before: Optional[str],
    after: Optional[str],
) -> str:
    """Classify the change from ``before`` to ``after``.

    Args:
        before: Version before the change, ``None`` if newly added.
        after: Version after the change, ``None`` if removed.

    Returns:
        One of:
            - ``"new"``       : no previous version
            - ``"removed"``   : no version afterwards
            - ``"same"``      : versions are identical
            - ``"downgrade"`` : target version is lower
            - ``"major"``     : major version change
            - ``"minor"``     : minor version change
            - ``"patch"``     : patch-level change
            - ``"update"``    : upgrade that cannot be classified further
            - ``"unknown"``   : nothing to compare or unparseable versions

    Examples:
        >>> get_update_type("1.13.0", "1.13.1")
        'patch'
        >>> get_update_type(None, "1.0.0")
        'new'
    """
    if before is None and after is None:
        return "unknown"

    if before is None:
        return "new"

    if after is None:
        return "removed"

    if before == after:
        return "same"

    try:
        current = _parse_version(before)
        target = _parse_version(after)
    except InvalidVersion:
        return "unknown"

    if target == current:
        return "same"

    if target < current:
        return "downgrade"

    return _classify_upgrade(current, target)


def _parse_version(value: str) -> Version:
    """Parse a version string into a PEP 440 Version object."""
    parsed = parse(value)
    if not isinstance(parsed, Version):
        raise InvalidVersion(value)
    return parsed


def _classify_upgrade(current: Version, target: Version) -> str:
    """Classify an upgrade between two valid versions."""
    current_release = _normalize_release(current)
    target_release = _normalize_release(target)

    for level, old, new in zip(
        ("major", "minor", "patch"), current_release, target_release
    ):
        if old != new:
            return level

    # Covers pre-release → release or metadata-only updates
    return "update"


def _normalize_release(version: Version) -> Tuple[int, int, int]:
    """Normalize a version's release segment to (major, minor, patch)."""
    release = tuple(version.release) + (0, 0, 0)
    return release[0], release[1], release[2]
