"""Configuration file loader for peerbump.

Handles discovery, loading, parsing, and validation of ``peerbump.toml``.
Settings live under a ``[peerbump]`` table.

Discovery order:

1. Explicit path from ``--config`` or ``PEERBUMP_CONFIG``
2. ``peerbump.toml`` in current directory

Configuration precedence: defaults < config file < CLI args.

Typical usage::

    config = load_config()  # Auto-discover
    config = load_config(Path("custom.toml"))  # Explicit path

Example (``peerbump.toml``)::

    [peerbump]
    caret = true
    git = true
    commit_prefix = "chore: "
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field

from peerbump.constants import CONFIG_FILENAME, DEFAULT_REGISTRY
from peerbump.exceptions import ConfigError
from peerbump.utils.logger import get_logger

logger = get_logger("config")

_BOOL_OPTIONS = ("caret", "tilde", "conservative", "git")
_STR_OPTIONS = ("commit_prefix", "registry")


@dataclass
class PeerBumpConfig:
    """Parsed and validated peerbump configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        caret: Write ``^version`` ranges.
        tilde: Write ``~version`` ranges; wins over ``caret``.
        conservative: Keep ranges that already accept the new version.
        git: Commit the manifest after each updated section.
        commit_prefix: Text put in front of commit messages.
        registry: npm registry base URL.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    caret: bool = False
    tilde: bool = False
    conservative: bool = False
    git: bool = False
    commit_prefix: str = ""
    registry: str = DEFAULT_REGISTRY

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "caret": self.caret,
            "tilde": self.tilde,
            "conservative": self.conservative,
            "git": self.git,
            "commit_prefix": self.commit_prefix,
            "registry": self.registry,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    candidate = Path.cwd() / CONFIG_FILENAME
    if candidate.is_file():
        logger.debug("Found %s: %s", CONFIG_FILENAME, candidate)
        return candidate

    logger.debug("No configuration file found")
    return None


def load_config(config_path: Optional[Path] = None) -> PeerBumpConfig:
    """Load and validate peerbump configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`PeerBumpConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        return PeerBumpConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    section = raw.get("peerbump", {})
    if not isinstance(section, dict):
        raise ConfigError(
            "[peerbump] must be a table",
            config_path=str(resolved),
        )

    if not section:
        logger.debug("Config file found but no peerbump section, using defaults")
        return PeerBumpConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is not valid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> PeerBumpConfig:
    """Validate the ``[peerbump]`` table.

    Rejects unknown keys and type mismatches.

    Raises:
        ConfigError: Unknown keys or incorrect types (e.g., string for boolean).
    """
    config = PeerBumpConfig()

    unknown = set(section) - set(_BOOL_OPTIONS) - set(_STR_OPTIONS)
    if unknown:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown))}",
            config_path=config_path,
        )

    for option in _BOOL_OPTIONS:
        if option in section:
            setattr(config, option, _expect(section, option, bool, "a boolean", config_path))

    for option in _STR_OPTIONS:
        if option in section:
            setattr(config, option, _expect(section, option, str, "a string", config_path))

    return config


def _expect(
    section: Dict[str, Any],
    option: str,
    kind: type,
    description: str,
    config_path: str,
) -> Any:
    val = section[option]
    if not isinstance(val, kind):
        raise ConfigError(
            f"{option} must be {description}, got {type(val).__name__}",
            config_path=config_path,
            option=option,
        )
    return val
