"""Write a section's planned updates to the manifest and commit them.

Starting from each pending record, the applier also writes every pending
record reachable through peer edges in either direction, so a package is
never bumped while a peer it is linked to stays stale. Each record is
written once; the manifest is saved once and, with version control
enabled, committed once per section.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from peerbump.core.graph import DependencyGraph
from peerbump.core.protocols import ManifestStore, VersionControl
from peerbump.models.package import PackageRecord
from peerbump.utils.logger import get_logger

logger = get_logger("core.applier")

__all__ = ["AppliedUpdate", "UpdateApplier", "build_commit_message"]


@dataclass
class AppliedUpdate:
    """What was written for one section.

    Attributes:
        section: Manifest section that was updated.
        changes: ``(name, old, new)`` in write order.
        commit_message: Message of the commit, if one was made.
    """

    section: str
    changes: List[Tuple[str, str, str]] = field(default_factory=list)
    commit_message: Optional[str] = None

    @property
    def committed(self) -> bool:
        return self.commit_message is not None


def build_commit_message(changes: List[Tuple[str, str, str]], prefix: str = "") -> str:
    """Return ``"<prefix>Update a from 1.0.0 to 2.0.0, b from ..."``."""
    body = ", ".join(f"{name} from {old} to {new}" for name, old, new in changes)
    return f"{prefix}Update {body}"


class UpdateApplier:
    """Apply planned updates through a manifest store and optional VCS.

    Args:
        manifest: Where the new ranges are written.
        vcs: Commits the manifest after a section is written, if given.
        commit_prefix: Text put in front of every commit message.
    """

    def __init__(
        self,
        manifest: ManifestStore,
        vcs: Optional[VersionControl] = None,
        commit_prefix: str = "",
    ) -> None:
        self.manifest = manifest
        self.vcs = vcs
        self.commit_prefix = commit_prefix

    def apply(
        self,
        section: str,
        graph: DependencyGraph,
        pending: List[PackageRecord],
    ) -> AppliedUpdate:
        """Write *pending* (and linked pending records), save, then commit.

        Raises:
            NotFoundError: A record is not declared in the manifest.
            FileOperationError: The manifest could not be written.
            GitError: Staging or committing failed.
        """
        result = AppliedUpdate(section=section)
        written: Set[str] = set()

        for record in pending:
            self._write_linked(graph, record, written, result)

        if not result.changes:
            return result

        self.manifest.save()

        if self.vcs is not None:
            message = build_commit_message(result.changes, self.commit_prefix)
            self.vcs.add(self.manifest.path)
            self.vcs.commit(message)
            result.commit_message = message
            logger.info("Committed %s: %s", self.manifest.path, message)

        return result

    def _write_linked(
        self,
        graph: DependencyGraph,
        start: PackageRecord,
        written: Set[str],
        result: AppliedUpdate,
    ) -> None:
        stack = [start]
        while stack:
            record = stack.pop()
            if record.name in written or not record.has_pending_update:
                continue

            self.manifest.set_version(record.name, record.update_version)
            written.add(record.name)
            result.changes.append((record.name, record.current_range, record.update_version))
            logger.debug("Wrote %s: %s -> %s", record.name, record.current_range, record.update_version)

            linked = [graph[name] for name in record.depends_on]
            linked += [graph[name] for name in record.depended_by]
            # Reversed so depends_on is walked first
            stack.extend(reversed(linked))
