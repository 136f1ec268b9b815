"""
Command-line interface for peerbump.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from peerbump.config import load_config
from peerbump.__version__ import __version__
from peerbump.context import PeerBumpContext
from peerbump.exceptions import ConfigError, PeerBumpError
from peerbump.utils.logger import get_logger, setup_logging
from peerbump.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="PEERBUMP_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--debug",
    "-d",
    is_flag=True,
    help="Enable debug logging with timestamps and tracebacks.",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="PEERBUMP_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="peerbump",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    debug: bool,
    color: bool,
) -> None:
    """peerbump: update package.json ranges without breaking peer dependencies.

    \b
    Available commands:
      peerbump update              Update dependencies and devDependencies

    \b
    Examples:
      peerbump update
      peerbump update --dry-run --caret
      peerbump -v update --git --commit-prefix "chore: "

    Use ``peerbump COMMAND --help`` for command-specific options.
    """
    if debug:
        verbose = max(verbose, 2)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    _configure_logging(verbose, debug)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    peerbump_ctx = PeerBumpContext()
    peerbump_ctx.config_path = config or loaded_config.source_path
    peerbump_ctx.color = color
    peerbump_ctx.verbose = verbose
    peerbump_ctx.config = loaded_config
    ctx.obj = peerbump_ctx

    logger.debug("peerbump v%s", __version__)
    logger.debug("Config path: %s", peerbump_ctx.config_path)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())
    logger.debug("Verbosity: %s | Color: %s", verbose, color)


def _configure_logging(verbose: int, debug: bool = False) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=debug)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


# Register CLI subcommands
from peerbump.commands.update import update  # noqa: E402

cli.add_command(update)


def main() -> int:
    """Main entry point for the peerbump CLI.

    Returns:
        Exit code:
            0   Success
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        cli(standalone_mode=False)
        return 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.exceptions.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except PeerBumpError as exc:
        print_error(str(exc))
        logger.debug(
            "PeerBumpError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
