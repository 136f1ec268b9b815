"""
Centralized constants for peerbump.

Immutable values shared across peerbump: registry endpoints, HTTP
settings, manifest layout, and logging formats.
"""

from typing import Final, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "peerbump/{version}"

# ---------------------------------------------------------------------------
# npm registry
# ---------------------------------------------------------------------------

#: Default npm registry base URL.
DEFAULT_REGISTRY: Final[str] = "https://registry.npmjs.org"

#: Accept header asking for abbreviated ("corgi") package metadata.
#: It still carries ``dist-tags`` and per-version ``peerDependencies``.
NPM_ABBREVIATED_ACCEPT: Final[str] = (
    "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8"
)

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Maximum number of registry fetches in flight at once.
DEFAULT_CONCURRENCY: Final[int] = 10

# ---------------------------------------------------------------------------
# Manifest layout
# ---------------------------------------------------------------------------

#: Default manifest file name.
MANIFEST_FILENAME: Final[str] = "package.json"

#: Runtime dependency section.
DEPENDENCIES: Final[str] = "dependencies"

#: Development dependency section.
DEV_DEPENDENCIES: Final[str] = "devDependencies"

#: Sections updated by the CLI, in order.
DEPENDENCY_SECTIONS: Final[Sequence[str]] = (DEPENDENCIES, DEV_DEPENDENCIES)

#: JSON indentation used when writing the manifest back.
MANIFEST_INDENT: Final[int] = 2

#: Maximum allowed manifest size (in bytes).
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Range prefixes
# ---------------------------------------------------------------------------

CARET: Final[str] = "^"
TILDE: Final[str] = "~"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

#: Configuration file discovered in the working directory.
CONFIG_FILENAME: Final[str] = "peerbump.toml"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
