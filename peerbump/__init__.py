"""
peerbump — peer-aware npm dependency updater

peerbump raises the version ranges declared in a ``package.json`` as far
as possible while keeping every ``peerDependencies`` constraint between
the updated packages satisfied.

Features include:
    • Grouping of packages linked by peer dependencies
    • Greedy newest-first version selection with backtracking
    • Caret / tilde range prefixes and a conservative mode
    • Dry-run previews and one git commit per dependency section
"""

from __future__ import annotations

from peerbump.__version__ import __version__

__author__ = "peerbump Contributors"
__license__ = "MIT"
__description__ = "Update npm dependencies without breaking peer dependencies."

__all__ = [
    "__version__",
]
