"""
Version helpers for peerbump.

npm versions follow Semantic Versioning 2.0.0. Parsing and precedence are
delegated to ``nodesemver`` (a port of npm's own ``semver`` package), so
pre-releases sort below their release exactly as npm orders them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from nodesemver import SemVer, make_semver, sort, valid

# Characters an npm range may carry in front of a plain version.
_RANGE_PREFIX_CHARS = "^~=v<> "


def is_semver(version: str) -> bool:
    """Return True if *version* is a valid (strict) semver string."""
    return valid(version, False) is not None


def sort_versions(versions: Iterable[str]) -> List[str]:
    """Return *versions* ordered by semver precedence, oldest first.

    Build metadata is ignored for ordering.

    Raises:
        ValueError: One of *versions* is not valid semver.

    Examples:
        >>> sort_versions(["1.0.0", "1.0.0-rc.1", "0.9.0"])
        ['0.9.0', '1.0.0-rc.1', '1.0.0']
    """
    return sort(list(versions), False)


def strip_range_prefix(value: str) -> str:
    """Strip range operators so ``"^1.2.3"`` compares as ``"1.2.3"``."""
    return value.lstrip(_RANGE_PREFIX_CHARS)


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Classify the change between a declared range and its new value.

    Range operators are stripped before comparing, so ``"^1.0.0"`` to
    ``"~2.1.0"`` is a ``"major"`` change.

    Returns:
        One of ``"same"``, ``"downgrade"``, ``"major"``, ``"minor"``,
        ``"patch"``, ``"update"`` or ``"unknown"``.

    Examples:
        >>> get_update_type("^1.0.0", "^2.0.0")
        'major'
        >>> get_update_type("1.2.3", "1.2.3")
        'same'
    """
    if current_version is None or target_version is None:
        return "unknown"

    try:
        current = make_semver(strip_range_prefix(current_version), False)
        target = make_semver(strip_range_prefix(target_version), False)
    except ValueError:
        return "unknown"

    order = target.compare(current)
    if order == 0:
        return "same"

    if order < 0:
        return "downgrade"

    return _classify_upgrade(current, target)


def _classify_upgrade(current: SemVer, target: SemVer) -> str:
    if current.major != target.major:
        return "major"

    if current.minor != target.minor:
        return "minor"

    if current.patch != target.patch:
        return "patch"

    # Pre-release to release
    return "update"
