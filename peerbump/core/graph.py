"""Dependency graph construction for peerbump.

Turns one manifest section into a :class:`DependencyGraph`: an arena of
:class:`~peerbump.models.package.PackageRecord` keyed by name, the
peer-dependency edges between them, and the (possibly overlapping)
package groups that the resolver walks.

Example graph shapes (arrows read "peer-depends on")::

    A            A          A     B          A <------+
                 ^          ^     ^          ^        |
                 |          |     |          |        |
                 B          +--C--+          B        |
                                             ^        |
                                             |        |
                                             C -------+

A package reachable from two roots (``C`` in the third shape) belongs to
both roots' groups.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Optional

from peerbump.core.protocols import Registry
from peerbump.exceptions import ConsistencyError, CyclicDependencyError, ManifestError
from peerbump.models.group import PackageGroup
from peerbump.models.package import PackageRecord
from peerbump.utils.logger import get_logger

logger = get_logger("core.graph")

__all__ = ["DependencyGraph", "GraphBuilder"]

_WHITE, _GREY, _BLACK = 0, 1, 2


class DependencyGraph:
    """Records of one manifest section plus their package groups.

    Args:
        section: Manifest section the records come from.
        records: Arena of records keyed by package name.
    """

    def __init__(self, section: str, records: Dict[str, PackageRecord]) -> None:
        self.section = section
        self.records = records
        self.groups: List[PackageGroup] = []

    def __getitem__(self, name: str) -> PackageRecord:
        try:
            return self.records[name]
        except KeyError:
            raise ConsistencyError(
                f"{name} should be in {self.section}, but was not found",
                package_name=name,
                section=self.section,
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self.records

    def __iter__(self) -> Iterator[PackageRecord]:
        return iter(self.records.values())

    def __len__(self) -> int:
        return len(self.records)

    # ------------------------------------------------------------------
    # Construction steps
    # ------------------------------------------------------------------

    def link(self) -> None:
        """Derive every ``depended_by`` map from the ``depends_on`` maps."""
        for record in self.records.values():
            record.depended_by.clear()

        for name, record in self.records.items():
            for peer_name, required in record.depends_on.items():
                self[peer_name].depended_by[name] = required

    def check_acyclic(self) -> None:
        """Raise :class:`CyclicDependencyError` if peers form a cycle."""
        state = {name: _WHITE for name in self.records}

        for start in self.records:
            if state[start] != _WHITE:
                continue

            path = [start]
            state[start] = _GREY
            stack = [iter(self.records[start].depends_on)]

            while stack:
                peer = next(stack[-1], None)
                if peer is None:
                    state[path.pop()] = _BLACK
                    stack.pop()
                    continue

                if state[peer] == _GREY:
                    cycle = path[path.index(peer) :] + [peer]
                    raise CyclicDependencyError(cycle, section=self.section)

                if state[peer] == _WHITE:
                    state[peer] = _GREY
                    path.append(peer)
                    stack.append(iter(self[peer].depends_on))

    def build_groups(self) -> List[PackageGroup]:
        """Grow one group from every root along ``depended_by`` edges."""
        self.groups = []

        for name, record in self.records.items():
            if not record.is_root:
                continue

            members = set()
            pending = [name]
            while pending:
                current = pending.pop()
                if current in members:
                    continue
                members.add(current)
                pending.extend(self[current].depended_by)

            group = PackageGroup(root=name, members=frozenset(members))
            self.groups.append(group)
            logger.debug("Created package group %s", group)

        return self.groups

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def groups_containing(self, name: str) -> List[int]:
        """Indices of every group that contains *name*."""
        return [index for index, group in enumerate(self.groups) if name in group]

    def pending_updates(self) -> List[PackageRecord]:
        """Records whose planned value differs from the declared range."""
        return [record for record in self.records.values() if record.has_pending_update]


class GraphBuilder:
    """Build a :class:`DependencyGraph` from a manifest section.

    Args:
        registry: Source of latest-version metadata and peer ranges.
    """

    def __init__(self, registry: Registry) -> None:
        self.registry = registry

    def build(
        self,
        section: str,
        dependencies: Mapping[str, Optional[str]],
    ) -> DependencyGraph:
        """Create records, link peers, reject cycles and form groups.

        Args:
            section: Section name, for messages.
            dependencies: ``name -> declared range`` of the section.

        Raises:
            ManifestError: A dependency has no declared range.
            RegistryError: Registry metadata is missing or malformed.
            ConsistencyError: A peer edge points outside the record set.
            CyclicDependencyError: The peer relation has a cycle.
        """
        records: Dict[str, PackageRecord] = {}

        for name, current_range in dependencies.items():
            if current_range is None:
                raise ManifestError(
                    f"Failed to get the current version of {name}",
                    section=section,
                )

            info = self.registry.info(name)
            depends_on = {
                peer_name: required
                for peer_name, required in info.peer_dependencies.items()
                if peer_name in dependencies
            }
            if depends_on:
                logger.debug(
                    "%s peer-depends on %s in %s",
                    name,
                    ", ".join(sorted(depends_on)),
                    section,
                )

            records[name] = PackageRecord(
                name=name,
                current_range=current_range,
                latest_version=info.version,
                available_versions=tuple(info.versions),
                depends_on=depends_on,
            )

        graph = DependencyGraph(section, records)
        graph.link()
        graph.check_acyclic()
        graph.build_groups()

        logger.debug(
            "Built graph for %s: %d package(s), %d group(s)",
            section,
            len(graph),
            len(graph.groups),
        )
        return graph
