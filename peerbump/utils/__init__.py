"""
Utility helpers for peerbump.

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Async HTTP client
- git wrapper
- Version helpers
"""

from __future__ import annotations

from peerbump.utils.filesystem import safe_read_file, safe_write_file

from peerbump.utils.logger import (
    NOTICE,
    get_logger,
    is_logging_configured,
    setup_logging,
)

from peerbump.utils.console import (
    colorize_update_type,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

from peerbump.utils.http import HTTPClient
from peerbump.utils.git import GitClient
from peerbump.utils.version_utils import get_update_type, sort_versions

__all__ = [
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    # Logging
    "NOTICE",
    "get_logger",
    "is_logging_configured",
    "setup_logging",
    # Console
    "colorize_update_type",
    "print_error",
    "print_success",
    "print_table",
    "print_warning",
    "reconfigure_console",
    # HTTP / git
    "HTTPClient",
    "GitClient",
    # Versions
    "get_update_type",
    "sort_versions",
]
