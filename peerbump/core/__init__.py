"""
Core functionality exports for peerbump.

Importing from here keeps user-facing imports clean and stable:

    from peerbump.core import PackageUpdater, NpmRegistry
"""

from __future__ import annotations

from peerbump.core.applier import AppliedUpdate, UpdateApplier
from peerbump.core.graph import DependencyGraph, GraphBuilder
from peerbump.core.manifest import PackageJsonManifest
from peerbump.core.planner import UpdatePlanner
from peerbump.core.registry import NpmPackageData, NpmRegistry
from peerbump.core.resolver import CandidateResolver
from peerbump.core.updater import PackageUpdater, SectionUpdate, UpdateOptions

__all__ = [
    "AppliedUpdate",
    "CandidateResolver",
    "DependencyGraph",
    "GraphBuilder",
    "NpmPackageData",
    "NpmRegistry",
    "PackageJsonManifest",
    "PackageUpdater",
    "SectionUpdate",
    "UpdateApplier",
    "UpdateOptions",
    "UpdatePlanner",
]
