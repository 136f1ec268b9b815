"""
Package group model.

A group is the set of package names reachable from one root package
(a package with no peer dependency inside the update set) by following
"is peer-depended on by" edges. Groups hold names, not records: records
live in the graph's arena, so a candidate chosen through one group is
seen by every other group containing the same name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterator


@dataclass(frozen=True)
class PackageGroup:
    """Immutable membership of one connected package group.

    Attributes:
        root: Name of the package the group was grown from.
        members: Every name in the group, root included.
    """

    root: str
    members: FrozenSet[str]

    def __contains__(self, name: object) -> bool:
        return name in self.members

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.members))

    def __len__(self) -> int:
        return len(self.members)

    def __str__(self) -> str:
        others = sorted(self.members - {self.root})
        if not others:
            return self.root
        return f"{self.root} <- {', '.join(others)}"
