"""Per-section update orchestration for peerbump.

:class:`PackageUpdater` wires the core stages together for one manifest
section::

    manifest section
        -> GraphBuilder.build()        records, peer edges, groups
        -> DependencyGraph.check_acyclic()
        -> CandidateResolver.resolve() newest compatible candidates
        -> UpdatePlanner.plan()        prefix policy, conservative mode
        -> UpdateApplier.apply()       manifest write + optional commit

Nothing is written unless every stage before the applier succeeded, so a
failure never leaves the manifest half updated.

Typical usage::

    registry = NpmRegistry(http)
    await registry.prefetch_packages(names)

    updater = PackageUpdater(manifest, registry, options=UpdateOptions(caret=True))
    for section in DEPENDENCY_SECTIONS:
        result = updater.update(section)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from peerbump.core.applier import AppliedUpdate, UpdateApplier
from peerbump.core.graph import GraphBuilder
from peerbump.core.planner import UpdatePlanner
from peerbump.core.protocols import ManifestStore, Registry, VersionControl
from peerbump.core.resolver import CandidateResolver
from peerbump.models.package import PackageRecord
from peerbump.utils.logger import NOTICE, get_logger

logger = get_logger("core.updater")

__all__ = ["PackageUpdater", "SectionUpdate", "UpdateOptions"]


@dataclass(frozen=True)
class UpdateOptions:
    """Behaviour switches for an update run.

    Attributes:
        dry_run: Plan and log only; write and commit nothing.
        caret: Write ``^version`` ranges.
        tilde: Write ``~version`` ranges (wins over ``caret``).
        conservative: Skip packages whose declared range already accepts
            the resolved version.
        commit_prefix: Text put in front of commit messages.
    """

    dry_run: bool = False
    caret: bool = False
    tilde: bool = False
    conservative: bool = False
    commit_prefix: str = ""


@dataclass
class SectionUpdate:
    """Outcome of :meth:`PackageUpdater.update` for one section."""

    section: str
    planned: List[PackageRecord] = field(default_factory=list)
    skipped: bool = False
    applied: Optional[AppliedUpdate] = None

    @property
    def commit_message(self) -> Optional[str]:
        return self.applied.commit_message if self.applied else None

    @property
    def has_updates(self) -> bool:
        return bool(self.planned)


class PackageUpdater:
    """Update one ``package.json`` section at a time.

    Args:
        manifest: Manifest being updated.
        registry: Registry metadata, already fetched for every package.
        vcs: Version control used to commit each written section.
        options: Behaviour switches.
    """

    def __init__(
        self,
        manifest: ManifestStore,
        registry: Registry,
        vcs: Optional[VersionControl] = None,
        options: Optional[UpdateOptions] = None,
    ) -> None:
        self.manifest = manifest
        self.registry = registry
        self.vcs = vcs
        self.options = options or UpdateOptions()

        self._builder = GraphBuilder(registry)
        self._resolver = CandidateResolver(registry)
        self._planner = UpdatePlanner(
            caret=self.options.caret,
            tilde=self.options.tilde,
            conservative=self.options.conservative,
        )
        self._applier = UpdateApplier(
            manifest,
            vcs=vcs,
            commit_prefix=self.options.commit_prefix,
        )

    def update(self, section: str) -> SectionUpdate:
        """Resolve, plan and (unless dry run) apply updates for *section*.

        Raises:
            PeerBumpError: Any stage failed; the manifest is untouched.
        """
        dependencies = self.manifest.get_section(section)
        if dependencies is None:
            logger.info("%s is not declared in %s; skipping", section, self.manifest.path)
            return SectionUpdate(section=section, skipped=True)

        logger.info("Updating %d package(s) in %s", len(dependencies), section)

        graph = self._builder.build(section, dependencies)
        self._resolver.resolve(graph)
        pending = self._planner.plan(graph)

        result = SectionUpdate(section=section, planned=pending)

        if not pending:
            logger.info("Packages in %s need no update", section)
            return result

        logger.info("Update plan for %s:", section)
        for record in pending:
            logger.info("  * %s: %s -> %s", record.name, record.current_range, record.update_version)

        if self.options.dry_run:
            logger.log(NOTICE, "Dry run: %s was not modified", section)
            return result

        result.applied = self._applier.apply(section, graph, pending)
        return result
