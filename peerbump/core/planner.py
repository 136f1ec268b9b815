"""Turn resolved candidates into the values written to the manifest."""

from __future__ import annotations

from typing import List

from nodesemver import satisfies

from peerbump.constants import CARET, TILDE
from peerbump.core.graph import DependencyGraph
from peerbump.models.package import PackageRecord
from peerbump.utils.logger import get_logger

logger = get_logger("core.planner")

__all__ = ["UpdatePlanner"]


class UpdatePlanner:
    """Apply the range-prefix policy and conservative suppression.

    Args:
        caret: Write ``^version``.
        tilde: Write ``~version``; wins over *caret*.
        conservative: Keep the declared range when it already accepts
            the resolved candidate.
    """

    def __init__(
        self,
        caret: bool = False,
        tilde: bool = False,
        conservative: bool = False,
    ) -> None:
        self.caret = caret
        self.tilde = tilde
        self.conservative = conservative

    def plan(self, graph: DependencyGraph) -> List[PackageRecord]:
        """Set ``update_version`` on every record; return those that change."""
        for record in graph:
            record.update_version = self._target_for(record)

        pending = graph.pending_updates()
        logger.debug("%d of %d package(s) in %s need an update", len(pending), len(graph), graph.section)
        return pending

    def _target_for(self, record: PackageRecord) -> str:
        candidate = record.update_candidate
        if candidate is None:
            # Resolution never reached the record; leave it untouched
            return record.current_range

        if candidate == record.current_range:
            return record.current_range

        target = self._with_prefix(candidate)

        if (
            self.conservative
            and target != record.current_range
            and satisfies(candidate, record.current_range)
        ):
            logger.info(
                "%s: %s already accepts %s; skipping (conservative)",
                record.name,
                record.current_range,
                candidate,
            )
            return record.current_range

        return target

    def _with_prefix(self, candidate: str) -> str:
        if self.tilde:
            return candidate if candidate.startswith(TILDE) else TILDE + candidate
        if self.caret:
            return candidate if candidate.startswith(CARET) else CARET + candidate
        return candidate
