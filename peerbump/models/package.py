"""
Package data models for peerbump.

:class:`PackageInfo` is what the registry reports for one package (or one
version of it). :class:`PackageRecord` is the mutable per-dependency node
that the graph builder creates, the resolver assigns a candidate to, and
the planner turns into the value written back to the manifest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class PackageInfo:
    """Registry metadata for ``name`` or ``name@version``.

    Attributes:
        name: Package name as published (scoped names keep their ``@scope/``).
        version: The requested version, or ``dist-tags.latest`` when no
            version was requested.
        versions: Every published version, oldest first.
        peer_dependencies: Peer name → acceptable range declared by
            ``version``.
    """

    name: str
    version: str
    versions: Tuple[str, ...] = ()
    peer_dependencies: Mapping[str, str] = field(default_factory=dict)

    @property
    def spec(self) -> str:
        """``name@version`` form of this entry."""
        return f"{self.name}@{self.version}"


@dataclass(eq=False)
class PackageRecord:
    """One dependency being updated.

    Records are shared by reference between every group that contains
    them, so equality is identity.

    Attributes:
        name: Dependency name as declared in the manifest.
        current_range: Range currently declared in the manifest.
        latest_version: ``dist-tags.latest`` reported by the registry.
        available_versions: Published versions, oldest first.
        depends_on: Peer name → range required by the *latest* release,
            limited to peers that are also being updated. Only used for
            topology.
        depended_by: Dependent name → range it requires of this package.
        update_candidate: Version tried during resolution.
        update_version: Final value to write to the manifest.
    """

    name: str
    current_range: str
    latest_version: str
    available_versions: Tuple[str, ...] = ()
    depends_on: Dict[str, str] = field(default_factory=dict)
    depended_by: Dict[str, str] = field(default_factory=dict)
    update_candidate: Optional[str] = None
    update_version: Optional[str] = None

    @property
    def is_root(self) -> bool:
        """True when the package peer-depends on nothing in the update set."""
        return not self.depends_on

    @property
    def has_pending_update(self) -> bool:
        """True when the planned value differs from the declared range."""
        return self.update_version is not None and self.update_version != self.current_range

    def position_of(self, version: Optional[str]) -> Optional[int]:
        """Return the last index of *version* in :attr:`available_versions`."""
        if version is None:
            return None
        for index in range(len(self.available_versions) - 1, -1, -1):
            if self.available_versions[index] == version:
                return index
        return None

    def to_json(self) -> Dict[str, Any]:
        """Return a JSON-serializable snapshot, for debug logging."""
        return {
            "name": self.name,
            "current": self.current_range,
            "latest": self.latest_version,
            "depends_on": dict(self.depends_on),
            "depended_by": dict(self.depended_by),
            "candidate": self.update_candidate,
            "update": self.update_version,
        }

    def __repr__(self) -> str:
        return (
            "PackageRecord("
            f"name={self.name!r}, "
            f"current_range={self.current_range!r}, "
            f"update_candidate={self.update_candidate!r}, "
            f"update_version={self.update_version!r}"
            ")"
        )
