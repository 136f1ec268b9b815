"""Unit tests for peerbump.core.planner module."""

from __future__ import annotations

import logging

import pytest

from peerbump.core.graph import DependencyGraph
from peerbump.core.planner import UpdatePlanner
from peerbump.models.package import PackageRecord


def _graph(*records: PackageRecord) -> DependencyGraph:
    return DependencyGraph("dependencies", {r.name: r for r in records})


def _record(name: str, current: str, candidate) -> PackageRecord:
    return PackageRecord(
        name=name,
        current_range=current,
        latest_version=candidate or current,
        update_candidate=candidate,
    )


@pytest.mark.unit
class TestUpdatePlanner:
    def test_bare_candidate_by_default(self) -> None:
        graph = _graph(_record("react", "^17.0.2", "18.2.0"))

        pending = UpdatePlanner().plan(graph)

        assert [r.update_version for r in pending] == ["18.2.0"]

    def test_caret_prefix(self) -> None:
        graph = _graph(_record("react", "17.0.2", "18.2.0"))

        UpdatePlanner(caret=True).plan(graph)

        assert graph["react"].update_version == "^18.2.0"

    def test_tilde_prefix(self) -> None:
        graph = _graph(_record("react", "17.0.2", "18.2.0"))

        UpdatePlanner(tilde=True).plan(graph)

        assert graph["react"].update_version == "~18.2.0"

    def test_tilde_wins_over_caret(self) -> None:
        graph = _graph(_record("react", "17.0.2", "18.2.0"))

        UpdatePlanner(caret=True, tilde=True).plan(graph)

        assert graph["react"].update_version == "~18.2.0"

    @pytest.mark.parametrize(
        "candidate, caret, tilde",
        [("^18.2.0", True, False), ("~18.2.0", False, True)],
        ids=["caret", "tilde"],
    )
    def test_prefix_not_doubled(self, candidate: str, caret: bool, tilde: bool) -> None:
        graph = _graph(_record("react", "17.0.2", candidate))

        UpdatePlanner(caret=caret, tilde=tilde).plan(graph)

        assert graph["react"].update_version == candidate

    def test_unchanged_candidate_is_not_pending(self) -> None:
        graph = _graph(_record("react", "18.2.0", "18.2.0"))

        pending = UpdatePlanner(caret=True).plan(graph)

        assert pending == []
        assert graph["react"].update_version == "18.2.0"

    def test_planning_is_idempotent(self) -> None:
        graph = _graph(_record("react", "17.0.2", "18.2.0"), _record("vue", "3.3.0", "3.4.0"))
        UpdatePlanner().plan(graph)

        # Simulate the manifest having been written
        for record in graph:
            record.current_range = record.update_version

        assert UpdatePlanner().plan(graph) == []

    def test_conservative_keeps_accepting_range(self, caplog: pytest.LogCaptureFixture) -> None:
        graph = _graph(_record("react", "^18.0.0", "18.2.0"))

        with caplog.at_level(logging.INFO, logger="peerbump"):
            pending = UpdatePlanner(caret=True, conservative=True).plan(graph)

        assert pending == []
        assert graph["react"].update_version == "^18.0.0"
        assert "conservative" in caplog.text

    def test_conservative_updates_rejecting_range(self) -> None:
        graph = _graph(_record("react", "^17.0.2", "18.2.0"))

        pending = UpdatePlanner(conservative=True).plan(graph)

        assert [r.update_version for r in pending] == ["18.2.0"]

    def test_unresolved_record_keeps_current_range(self) -> None:
        graph = _graph(_record("react", "^17.0.2", None))

        assert UpdatePlanner().plan(graph) == []
        assert graph["react"].update_version == "^17.0.2"

    def test_only_changed_records_returned(self) -> None:
        graph = _graph(
            _record("react", "17.0.2", "18.2.0"),
            _record("lodash", "4.17.21", "4.17.21"),
        )

        pending = UpdatePlanner().plan(graph)

        assert [r.name for r in pending] == ["react"]
