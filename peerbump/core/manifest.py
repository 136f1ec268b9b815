"""``package.json`` access for peerbump.

The manifest is read once, held in memory while a section is resolved,
and written back with :meth:`PackageJsonManifest.save` after all of a
section's changes have been applied. Key order is preserved; output is
indented with two spaces like npm's own.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from peerbump.constants import DEPENDENCIES, DEV_DEPENDENCIES, MANIFEST_INDENT
from peerbump.exceptions import ManifestError, NotFoundError
from peerbump.utils.filesystem import safe_read_file, safe_write_file
from peerbump.utils.logger import get_logger

logger = get_logger("manifest")


class PackageJsonManifest:
    """In-memory view of a ``package.json`` file.

    Args:
        path: Location of the manifest.

    Raises:
        FileOperationError: The file cannot be read.
        ManifestError: The file is not a JSON object or a dependency
            section is not a ``name -> range`` object of strings.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        text = safe_read_file(self.path)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ManifestError(
                f"Invalid JSON in {self.path.name}: {exc}",
                file_path=str(self.path),
            ) from exc

        if not isinstance(data, dict):
            raise ManifestError(
                f"{self.path.name} must contain a JSON object",
                file_path=str(self.path),
            )

        for section in (DEPENDENCIES, DEV_DEPENDENCIES):
            if not _is_valid_section(data.get(section)):
                raise ManifestError(
                    f"{section} must map package names to version strings",
                    file_path=str(self.path),
                    section=section,
                )

        logger.debug("Loaded manifest %s", self.path)
        return data

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_section(self, section: str) -> Optional[Dict[str, str]]:
        """Return a copy of *section*, or ``None`` when it is absent."""
        deps = self._data.get(section)
        if deps is None:
            return None
        return dict(deps)

    def get_dependencies(self) -> Optional[Dict[str, str]]:
        return self.get_section(DEPENDENCIES)

    def get_dev_dependencies(self) -> Optional[Dict[str, str]]:
        return self.get_section(DEV_DEPENDENCIES)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_version(self, name: str, version: str) -> None:
        """Overwrite the range of *name* in every section declaring it.

        The change stays in memory until :meth:`save`.

        Raises:
            NotFoundError: *name* is declared in no dependency section.
        """
        found = False
        for section in (DEV_DEPENDENCIES, DEPENDENCIES):
            deps = self._data.get(section)
            if deps is not None and name in deps:
                deps[name] = version
                found = True

        if not found:
            raise NotFoundError(name, file_path=str(self.path))

        logger.debug("Set %s to %s", name, version)

    def save(self) -> None:
        """Write the whole manifest back to :attr:`path`."""
        content = json.dumps(self._data, indent=MANIFEST_INDENT, ensure_ascii=False)
        safe_write_file(self.path, content + "\n")
        logger.info("Saved %s", self.path)


def _is_valid_section(deps: Any) -> bool:
    if deps is None:
        return True
    if not isinstance(deps, Mapping):
        return False
    return all(isinstance(k, str) and isinstance(v, str) for k, v in deps.items())
