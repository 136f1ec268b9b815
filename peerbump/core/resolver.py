"""Candidate resolution with backtracking for peerbump.

Every package starts optimistically at its latest release. Walking each
group from its root towards its dependents, a package whose peer range
is not met by the candidate of the package it peer-depends on triggers a
*forced lowering*:

* if the dependency's candidate is below every version the range
  accepts, the dependency cannot be raised (candidates only ever move
  down), so the dependent is lowered instead;
* otherwise the dependency is too new, and is lowered to the newest
  older version satisfying the range.

A lowered package is then re-validated in every other group that
contains it, and its dependents are re-checked against the new value.

Once every group has been walked, all peer edges are checked together.
Packages still without a candidate, or whose peer range is not met, are
walked again until the whole graph is consistent. Candidates never move
up once set, so this converges or runs out of versions.

The walk is an explicit LIFO stack of :class:`_Step` frames, so the
visiting order is that of a depth-first recursion without using the
Python call stack.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from nodesemver import lt, min_satisfying, satisfies

from peerbump.core.graph import DependencyGraph
from peerbump.core.protocols import Registry
from peerbump.exceptions import (
    ConsistencyError,
    NoCandidateError,
    RegistryError,
    ResolutionError,
)
from peerbump.models.package import PackageRecord
from peerbump.utils.logger import get_logger

logger = get_logger("core.resolver")

__all__ = ["CandidateResolver"]

# ---------------------------------------------------------------------------
# Tuning constants
# ---------------------------------------------------------------------------

#: Upper bound on visited steps for one section. Every forced lowering
#: strictly decreases a version index, so a run hitting this is a defect.
_MAX_RESOLUTION_STEPS: int = 10_000


@dataclass(frozen=True)
class _Step:
    """One pending visit of *name* inside group *group_index*."""

    group_index: int
    name: str
    forced_lower: bool = False
    required_range: Optional[str] = None


class CandidateResolver:
    """Assign a mutually compatible ``update_candidate`` to every record.

    Args:
        registry: Queried for the peer ranges of each tried candidate.
        max_steps: Step budget before giving up with :class:`ResolutionError`.
    """

    def __init__(
        self,
        registry: Registry,
        max_steps: int = _MAX_RESOLUTION_STEPS,
    ) -> None:
        self.registry = registry
        self.max_steps = max_steps

    def resolve(self, graph: DependencyGraph) -> None:
        """Resolve every group of *graph*, starting each at its root.

        Candidates are written onto the graph's records in place. On
        return every record has a candidate and every peer range between
        candidates is satisfied.

        Raises:
            NoCandidateError: A package ran out of older versions to try.
            ResolutionError: The step budget was exhausted.
            RegistryError: A tried version lacks an expected peer range.
            ConsistencyError: A step referenced a name outside its group.
        """
        steps_taken = 0

        for index, group in enumerate(graph.groups):
            logger.debug("Resolving package group %s", group)
            steps_taken = self._run(graph, [_Step(index, group.root)], steps_taken)

        unsettled = self._unsettled_steps(graph)
        while unsettled:
            logger.debug(
                "Re-resolving %s",
                ", ".join(step.name for step in unsettled),
            )
            steps_taken = self._run(graph, unsettled, steps_taken)
            unsettled = self._unsettled_steps(graph)

        for record in graph:
            logger.debug("Resolved %s", record.to_json())

    def _run(self, graph: DependencyGraph, steps: List[_Step], steps_taken: int) -> int:
        """Visit *steps* and everything they lead to; return the new step count."""
        # Reversed so the first step is visited next
        stack = list(reversed(steps))

        while stack:
            steps_taken += 1
            if steps_taken > self.max_steps:
                step = stack[-1]
                raise ResolutionError(
                    f"Resolution did not finish within {self.max_steps} steps",
                    package_name=step.name,
                    candidate=graph[step.name].update_candidate,
                )

            step = stack.pop()
            follow_ups = self._visit(graph, step)
            stack.extend(reversed(follow_ups))

        return steps_taken

    def _unsettled_steps(self, graph: DependencyGraph) -> List[_Step]:
        """Steps for records without a candidate or with an unmet peer range.

        A violated ``A -> B`` edge is revisited in a group containing
        ``B``; every dependent of ``B`` belongs to each of its groups, so
        the edge is checked there rather than skipped.
        """
        steps: List[_Step] = []

        for record in graph:
            if record.update_candidate is None:
                steps.append(_Step(graph.groups_containing(record.name)[0], record.name))
                continue

            if not record.depends_on:
                continue

            spec = f"{record.name}@{record.update_candidate}"
            peers = self.registry.info(spec).peer_dependencies
            for dep_name in record.depends_on:
                dep = graph[dep_name]
                if dep.update_candidate is None:
                    continue

                required = peers.get(dep_name)
                if required is None or not satisfies(dep.update_candidate, required):
                    logger.debug(
                        "%s does not accept %s@%s",
                        spec,
                        dep_name,
                        dep.update_candidate,
                    )
                    steps.append(_Step(graph.groups_containing(dep_name)[0], record.name))
                    break

        return steps

    # ------------------------------------------------------------------
    # Single visit
    # ------------------------------------------------------------------

    def _visit(self, graph: DependencyGraph, step: _Step) -> List[_Step]:
        group = graph.groups[step.group_index]
        if step.name not in group:
            raise ConsistencyError(
                f"{step.name} is not a member of package group {group}",
                package_name=step.name,
                section=graph.section,
            )

        record = graph[step.name]

        assigned_now = record.update_candidate is None
        if assigned_now:
            record.update_candidate = record.latest_version
            logger.debug("Set the candidate of %s to %s", record.name, record.update_candidate)
        elif step.forced_lower:
            record.update_candidate = self._next_lower(record, step.required_range)
            logger.debug("Lowered the candidate of %s to %s", record.name, record.update_candidate)

        spec = f"{record.name}@{record.update_candidate}"
        peers = self.registry.info(spec).peer_dependencies

        for dep_name in record.depends_on:
            required = peers.get(dep_name)
            if required is None:
                raise RegistryError(
                    f"{dep_name} should be a peer dependency of {spec}, "
                    "but the registry does not declare it",
                    package_name=spec,
                )

            if dep_name not in group:
                logger.debug("%s is checked in another package group", dep_name)
                continue

            dep = graph[dep_name]
            if dep.update_candidate is None:
                logger.debug("%s has no candidate yet; resolving it first", dep_name)
                # A candidate settled by an earlier visit keeps the lowerings
                # other groups forced on it
                if assigned_now:
                    record.update_candidate = None
                return []

            if satisfies(dep.update_candidate, required):
                continue

            logger.debug(
                "%s requires %s@%s but the candidate is %s",
                spec,
                dep_name,
                required,
                dep.update_candidate,
            )

            if _is_below_minimum(dep, required):
                logger.debug("%s is too new for %s; lowering it", record.name, dep_name)
                return [_Step(step.group_index, record.name, forced_lower=True)]

            logger.debug("%s is too new for %s; lowering it", dep_name, record.name)
            return [
                _Step(step.group_index, dep_name, forced_lower=True, required_range=required)
            ]

        follow_ups: List[_Step] = []

        if step.forced_lower:
            for other_index in graph.groups_containing(record.name):
                if other_index != step.group_index:
                    logger.debug(
                        "Rechecking %s in package group %s",
                        record.name,
                        graph.groups[other_index],
                    )
                    follow_ups.append(_Step(other_index, record.name))

        for dependent in record.depended_by:
            follow_ups.append(_Step(step.group_index, dependent))

        return follow_ups

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _next_lower(record: PackageRecord, required_range: Optional[str]) -> str:
        """Return the version to try after *record*'s current candidate.

        Raises:
            NoCandidateError: No older version exists, or none older
                satisfies *required_range*.
        """
        position = record.position_of(record.update_candidate)
        if position is None:
            raise NoCandidateError(
                f"The candidate of {record.name} is not a published version",
                package_name=record.name,
                candidate=record.update_candidate,
            )
        if position == 0:
            raise NoCandidateError(
                f"The candidate of {record.name} is its oldest version; "
                "no older version is left to try",
                package_name=record.name,
                candidate=record.update_candidate,
            )

        if required_range is None:
            return record.available_versions[position - 1]

        for version in reversed(record.available_versions[:position]):
            if satisfies(version, required_range):
                return version

        raise NoCandidateError(
            f"No version of {record.name} older than {record.update_candidate} "
            f"satisfies {required_range}",
            package_name=record.name,
            candidate=record.update_candidate,
        )


def _is_below_minimum(dep: PackageRecord, required_range: str) -> bool:
    """True when *dep*'s candidate is older than anything *required_range* accepts.

    The minimum is the oldest published version satisfying the range; a
    range no published version satisfies counts as unreachable.
    """
    minimum = min_satisfying(dep.available_versions, required_range)
    if minimum is None:
        return True
    return lt(dep.update_candidate, minimum, False)
