"""
Git wrapper used to commit manifest updates.

Commands run as argument vectors (never through a shell), so commit
messages need no quoting. Failures are raised, never retried.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional, Union

from peerbump.exceptions import GitError
from peerbump.utils.logger import get_logger

logger = get_logger("git")


class GitClient:
    """Stage and commit files in a git work tree.

    Args:
        cwd: Directory to run git in. Defaults to the process working
            directory.
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None) -> None:
        self.cwd = Path(cwd) if cwd is not None else None

    def add(self, path: Union[str, Path]) -> None:
        """Stage *path*."""
        self._run("add", str(path))

    def commit(self, message: str) -> None:
        """Commit the index with *message*."""
        self._run("commit", "-m", message)

    def _run(self, *args: str) -> str:
        command = ["git", *args]
        logger.debug("Running %s", " ".join(command))

        try:
            result = subprocess.run(
                command,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                check=True,
            )
        except FileNotFoundError as exc:
            raise GitError("git executable not found", command=command) from exc
        except subprocess.CalledProcessError as exc:
            raise GitError(
                f"git {args[0]} failed",
                command=command,
                returncode=exc.returncode,
                stderr=exc.stderr,
            ) from exc

        return result.stdout.strip()
