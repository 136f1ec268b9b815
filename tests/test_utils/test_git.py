from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from peerbump.exceptions import GitError
from peerbump.utils.git import GitClient


@pytest.fixture
def mock_run():
    with patch("peerbump.utils.git.subprocess.run") as run:
        run.return_value = MagicMock(stdout="ok\n")
        yield run


@pytest.mark.unit
class TestGitClient:
    """Tests for GitClient command construction and error mapping."""

    def test_add(self, mock_run: MagicMock, tmp_path: Path) -> None:
        GitClient(cwd=tmp_path).add(tmp_path / "package.json")

        mock_run.assert_called_once_with(
            ["git", "add", str(tmp_path / "package.json")],
            cwd=tmp_path,
            capture_output=True,
            text=True,
            check=True,
        )

    def test_commit_message_passed_as_single_argument(self, mock_run: MagicMock) -> None:
        message = 'chore: Update A from 1.0.0 to 2.0.0, B from "1" to 2'

        GitClient().commit(message)

        args = mock_run.call_args.args[0]
        assert args == ["git", "commit", "-m", message]
        assert mock_run.call_args.kwargs["cwd"] is None

    def test_run_returns_stripped_stdout(self, mock_run: MagicMock) -> None:
        assert GitClient()._run("status") == "ok"

    def test_non_zero_exit(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ["git", "commit"], stderr="nothing to commit\n"
        )

        with pytest.raises(GitError, match="git commit failed") as exc_info:
            GitClient().commit("msg")

        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr == "nothing to commit\n"
        assert exc_info.value.details["stderr"] == "nothing to commit"

    def test_git_not_installed(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = FileNotFoundError("git")

        with pytest.raises(GitError, match="not found"):
            GitClient().add("package.json")
