"""
Interfaces of the collaborators the update core talks to.

The core only needs these capabilities, so tests can substitute
deterministic in-memory fakes for the npm registry, the manifest file
and git.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Protocol

from peerbump.models.package import PackageInfo


class Registry(Protocol):
    def info(self, spec: str) -> PackageInfo:
        """Return metadata for ``name`` (latest) or ``name@version``."""
        ...


class ManifestStore(Protocol):
    path: Path

    def get_section(self, section: str) -> Optional[Dict[str, str]]:
        """Return ``name -> range`` for *section*, or None if absent."""
        ...

    def set_version(self, name: str, version: str) -> None:
        ...

    def save(self) -> None:
        ...


class VersionControl(Protocol):
    def add(self, path: Path) -> None:
        ...

    def commit(self, message: str) -> None:
        ...
