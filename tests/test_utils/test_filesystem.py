from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from peerbump.exceptions import FileOperationError
from peerbump.utils.filesystem import safe_read_file, safe_write_file


@pytest.mark.unit
class TestSafeReadFile:
    """Tests for safe_read_file."""

    def test_reads_text(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text('{"name": "demo"}', encoding="utf-8")

        assert safe_read_file(path) == '{"name": "demo"}'

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{}", encoding="utf-8")

        assert safe_read_file(str(path)) == "{}"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="File not found") as exc_info:
            safe_read_file(tmp_path / "missing.json")

        assert exc_info.value.operation == "read"

    def test_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="Not a file"):
            safe_read_file(tmp_path)

    def test_too_large(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("x" * 20, encoding="utf-8")

        with pytest.raises(FileOperationError, match="File too large"):
            safe_read_file(path, max_size=10)

    def test_size_limit_disabled(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("x" * 20, encoding="utf-8")

        assert safe_read_file(path, max_size=None) == "x" * 20

    def test_invalid_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(FileOperationError, match="Failed to read"):
            safe_read_file(path)


@pytest.mark.unit
class TestSafeWriteFile:
    """Tests for safe_write_file."""

    def test_writes_content(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"

        safe_write_file(path, '{"a": 1}\n')

        assert path.read_text(encoding="utf-8") == '{"a": 1}\n'

    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("old", encoding="utf-8")

        safe_write_file(path, "new")

        assert path.read_text(encoding="utf-8") == "new"

    def test_leaves_no_temporary_files(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"

        safe_write_file(path, "{}")

        assert [p.name for p in tmp_path.iterdir()] == ["package.json"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(FileOperationError, match="Atomic write failed") as exc_info:
            safe_write_file(tmp_path / "nope" / "package.json", "{}")

        assert exc_info.value.operation == "write"

    def test_failed_replace_cleans_up(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("old", encoding="utf-8")

        with patch.object(Path, "replace", side_effect=OSError("read-only")):
            with pytest.raises(FileOperationError):
                safe_write_file(path, "new")

        assert path.read_text(encoding="utf-8") == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["package.json"]
