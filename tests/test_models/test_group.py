"""Unit tests for peerbump.models.group module."""

from __future__ import annotations

import pytest

from peerbump.models.group import PackageGroup


class TestPackageGroup:
    def test_membership(self) -> None:
        group = PackageGroup(root="react", members=frozenset({"react", "react-dom"}))

        assert "react-dom" in group
        assert "vue" not in group

    def test_iteration_is_sorted(self) -> None:
        group = PackageGroup(root="b", members=frozenset({"c", "b", "a"}))

        assert list(group) == ["a", "b", "c"]

    def test_len(self) -> None:
        group = PackageGroup(root="a", members=frozenset({"a", "b"}))

        assert len(group) == 2

    def test_str_lists_root_first(self) -> None:
        group = PackageGroup(root="react", members=frozenset({"react", "redux", "react-dom"}))

        assert str(group) == "react <- react-dom, redux"

    def test_str_single_member(self) -> None:
        group = PackageGroup(root="lodash", members=frozenset({"lodash"}))

        assert str(group) == "lodash"

    def test_frozen(self) -> None:
        group = PackageGroup(root="a", members=frozenset({"a"}))

        with pytest.raises(AttributeError):
            group.root = "b"  # type: ignore[misc]
