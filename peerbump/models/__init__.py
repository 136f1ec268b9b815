"""
Unified data model exports for peerbump.

Example:
    >>> from peerbump.models import PackageRecord, PackageGroup
"""

from __future__ import annotations

from peerbump.models.group import PackageGroup
from peerbump.models.package import PackageInfo, PackageRecord

__all__ = [
    "PackageInfo",
    "PackageRecord",
    "PackageGroup",
]
