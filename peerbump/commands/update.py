"""Update command implementation for peerbump.

Updates the ``dependencies`` and ``devDependencies`` of a ``package.json``
to the newest versions whose ``peerDependencies`` stay satisfied among
the packages being updated together.

The command:

1. **PackageJsonManifest** reads the manifest once
2. **NpmRegistry** fetches every package's metadata in one concurrent
   burst (one request per package)
3. **PackageUpdater** resolves, plans and applies each section in turn,
   committing it with git when requested

Typical usage::

    # Update package.json in the current directory
    $ peerbump update

    # Preview changes, writing caret ranges
    $ peerbump update --dry-run --caret

    # Commit each updated section
    $ peerbump update --git --commit-prefix "chore: "
"""

from __future__ import annotations

import sys
import asyncio
from pathlib import Path
from typing import Iterable, List, Optional

import click

from peerbump.config import PeerBumpConfig
from peerbump.constants import DEPENDENCY_SECTIONS, MANIFEST_FILENAME, NPM_ABBREVIATED_ACCEPT
from peerbump.context import PeerBumpContext, pass_context
from peerbump.core import NpmRegistry, PackageJsonManifest, PackageUpdater, SectionUpdate, UpdateOptions
from peerbump.exceptions import PeerBumpError
from peerbump.utils import (
    GitClient,
    HTTPClient,
    colorize_update_type,
    get_logger,
    get_update_type,
    print_error,
    print_success,
    print_table,
    print_warning,
)

logger = get_logger("commands.update")


@click.command()
@click.argument(
    "file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=MANIFEST_FILENAME,
)
@click.option(
    "--dry-run",
    "-r",
    is_flag=True,
    help="Show the update plan without modifying anything.",
)
@click.option(
    "--caret",
    "-c",
    is_flag=True,
    help="Write caret ranges (^1.2.3).",
)
@click.option(
    "--tilde",
    "-t",
    is_flag=True,
    help="Write tilde ranges (~1.2.3). Wins over --caret.",
)
@click.option(
    "--conservative",
    is_flag=True,
    help="Keep ranges that already accept the new version.",
)
@click.option(
    "--git",
    "-g",
    "use_git",
    is_flag=True,
    help="Commit package.json after each updated section.",
)
@click.option(
    "--commit-prefix",
    "-p",
    default=None,
    help='Prefix for commit messages, e.g. "chore: ".',
)
@click.option(
    "--registry",
    default=None,
    help="npm registry base URL.",
)
@pass_context
def update(
    ctx: PeerBumpContext,
    file: Path,
    dry_run: bool,
    caret: bool,
    tilde: bool,
    conservative: bool,
    use_git: bool,
    commit_prefix: Optional[str],
    registry: Optional[str],
) -> None:
    """Update package.json to the newest peer-compatible versions.

    Every package starts at its latest release. When a package's
    ``peerDependencies`` reject the version chosen for one of its peers,
    one of the two is lowered until both agree.

    Flags combine with ``peerbump.toml``; a flag given on the command
    line always enables the option.

    Exits:
        0 if updates were applied or none were needed,
        1 if an error occurred.
    """
    config = ctx.config or PeerBumpConfig()

    options = UpdateOptions(
        dry_run=dry_run,
        caret=caret or config.caret,
        tilde=tilde or config.tilde,
        conservative=conservative or config.conservative,
        commit_prefix=commit_prefix if commit_prefix is not None else config.commit_prefix,
    )

    try:
        _update(
            file,
            options,
            registry_url=registry or config.registry,
            use_git=use_git or config.git,
        )

    except PeerBumpError as e:
        print_error(f"{e}")
        logger.debug("Update failed", exc_info=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


def _update(
    file: Path,
    options: UpdateOptions,
    *,
    registry_url: str,
    use_git: bool,
) -> List[SectionUpdate]:
    """Fetch metadata, then update every dependency section in order.

    Raises:
        PeerBumpError: Reading, resolving or writing a section failed.
    """
    path = file.resolve()
    logger.info("Checking %s for updates...", path)

    manifest = PackageJsonManifest(path)

    names: List[str] = []
    for deps in (manifest.get_dependencies(), manifest.get_dev_dependencies()):
        names.extend(deps or {})

    if not names:
        print_warning(f"No dependencies found in {file}")
        return []

    registry = asyncio.run(_fetch_registry(names, registry_url))

    vcs = GitClient(cwd=path.parent) if use_git else None
    updater = PackageUpdater(manifest, registry, vcs=vcs, options=options)

    results = []
    for section in DEPENDENCY_SECTIONS:
        result = updater.update(section)
        _report(result, options.dry_run)
        results.append(result)

    return results


async def _fetch_registry(names: Iterable[str], registry_url: str) -> NpmRegistry:
    """Warm a registry cache with every package in *names*."""
    async with HTTPClient(headers={"Accept": NPM_ABBREVIATED_ACCEPT}) as http:
        registry = NpmRegistry(http, registry_url=registry_url)
        await registry.prefetch_packages(names)
    return registry


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------


def _report(result: SectionUpdate, dry_run: bool) -> None:
    if result.skipped:
        return

    if not result.has_updates:
        print_success(f"All packages in {result.section} are up to date!")
        return

    _display_update_plan(result, dry_run)

    if dry_run:
        print_warning("Dry run mode - no changes applied")
        return

    if result.applied is not None:
        print_success(
            f"Updated {len(result.applied.changes)} package(s) in {result.section}"
        )
    if result.commit_message:
        print_success(f"Committed: {result.commit_message}")


def _display_update_plan(result: SectionUpdate, dry_run: bool) -> None:
    """Display a section's planned updates as a Rich table.

    Example output::

        ┏━━━━━━━━━━━┳━━━━━━━━━┳━━━━━━━━━┳━━━━━━━━┓
        ┃ Package   ┃ Current ┃ New     ┃ Change ┃
        ┡━━━━━━━━━━━╇━━━━━━━━━╇━━━━━━━━━╇━━━━━━━━┩
        │ react     │ ^17.0.2 │ ^18.2.0 │ major  │
        │ react-dom │ ^17.0.2 │ ^18.2.0 │ major  │
        └───────────┴─────────┴─────────┴────────┘
    """
    title = f"Update Plan: {result.section}"
    if dry_run:
        title += " (Dry Run)"

    data = []
    for record in result.planned:
        update_type = get_update_type(record.current_range, record.update_version)
        data.append(
            {
                "Package": record.name,
                "Current": record.current_range,
                "New": f"[bold green]{record.update_version}[/bold green]",
                "Change": colorize_update_type(update_type),
            }
        )

    column_styles = {
        "Package": {"style": "bold cyan", "no_wrap": True},
        "Current": {"justify": "center", "style": "dim"},
        "New": {"justify": "center"},
        "Change": {"justify": "center"},
    }

    print_table(data, title=title, column_styles=column_styles)
