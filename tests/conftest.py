"""Shared fakes for the registry, manifest and git collaborators.

The fakes satisfy the protocols in :mod:`peerbump.core.protocols` so the
update core can be exercised without network access or real files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

import pytest

from peerbump.core.registry import NpmPackageData, split_spec
from peerbump.exceptions import NotFoundError
from peerbump.models.package import PackageInfo

# name -> {version: peerDependencies or None}, versions oldest first
Packages = Mapping[str, Mapping[str, Optional[Mapping[str, str]]]]


class FakeRegistry:
    """In-memory registry; the last listed version of a package is latest."""

    def __init__(self, packages: Packages, latest: Optional[Dict[str, str]] = None) -> None:
        latest = latest or {}
        self._data: Dict[str, NpmPackageData] = {}
        for name, versions in packages.items():
            manifests = {
                version: ({"peerDependencies": dict(peers)} if peers else {})
                for version, peers in versions.items()
            }
            self._data[name] = NpmPackageData(
                name=name,
                latest_version=latest.get(name, list(versions)[-1]),
                versions=tuple(versions),
                manifests=manifests,
            )
        self.queries: List[str] = []

    def info(self, spec: str) -> PackageInfo:
        self.queries.append(spec)
        name, version = split_spec(spec)
        return self._data[name].info(version)


class FakeManifest:
    """In-memory manifest recording writes and saves."""

    def __init__(
        self,
        sections: Mapping[str, Mapping[str, str]],
        path: Path = Path("package.json"),
    ) -> None:
        self.path = path
        self.sections: Dict[str, Dict[str, str]] = {k: dict(v) for k, v in sections.items()}
        self.writes: List[Tuple[str, str]] = []
        self.saves = 0

    def get_section(self, section: str) -> Optional[Dict[str, str]]:
        deps = self.sections.get(section)
        return None if deps is None else dict(deps)

    def set_version(self, name: str, version: str) -> None:
        found = False
        for deps in self.sections.values():
            if name in deps:
                deps[name] = version
                found = True
        if not found:
            raise NotFoundError(name, file_path=str(self.path))
        self.writes.append((name, version))

    def save(self) -> None:
        self.saves += 1


class FakeGit:
    """Records staged paths and commit messages."""

    def __init__(self) -> None:
        self.added: List[Path] = []
        self.commits: List[str] = []

    def add(self, path: Path) -> None:
        self.added.append(path)

    def commit(self, message: str) -> None:
        self.commits.append(message)


@pytest.fixture
def make_registry():
    """Return the :class:`FakeRegistry` factory."""
    return FakeRegistry


@pytest.fixture
def make_manifest():
    """Return the :class:`FakeManifest` factory."""
    return FakeManifest


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def ab_packages() -> Packages:
    """``B`` peer-requires ``A@^2.0.0``; ``A`` has a newer ``3.0.0``."""
    return {
        "A": {"1.0.0": None, "2.0.0": None, "3.0.0": None},
        "B": {"1.0.0": {"A": "^1.0.0"}, "2.0.0": {"A": "^2.0.0"}},
    }


@pytest.fixture(autouse=True)
def _reset_peerbump_logger():
    """Undo ``setup_logging`` so caplog sees records in every test."""
    yield
    logger = logging.getLogger("peerbump")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
