"""
peerbump version information.

Single source of truth for the package version, following Semantic
Versioning (https://semver.org/).
"""

from __future__ import annotations

import re

__version__ = "0.3.0"


def _parse_version(version: str):
    """
    Split a version string into its numeric components.

    Returns:
        dict: {
            "major": int,
            "minor": int,
            "patch": int,
            "prerelease": str | None,
        }
    """
    pattern = r"^(\d+)\.(\d+)\.(\d+)(?:[.-]([a-zA-Z0-9]+))?$"
    match = re.match(pattern, version)

    if not match:
        raise ValueError(f"Invalid version string: {version}")

    major, minor, patch, pre = match.groups()

    return {
        "major": int(major),
        "minor": int(minor),
        "patch": int(patch),
        "prerelease": pre,
    }


VERSION_INFO = _parse_version(__version__)

VERSION_STRING = f"peerbump {__version__}"
