from __future__ import annotations

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from peerbump.config import PeerBumpConfig
from peerbump.context import PeerBumpContext, pass_context


@pytest.mark.unit
class TestPeerBumpContext:
    """Tests for PeerBumpContext class."""

    def test_default_initialization(self) -> None:
        ctx = PeerBumpContext()

        assert ctx.config_path is None
        assert ctx.verbose == 0
        assert ctx.color is True
        assert ctx.config is None

    def test_all_attributes_can_be_set(self) -> None:
        ctx = PeerBumpContext()
        config = PeerBumpConfig(caret=True)

        ctx.config_path = Path("peerbump.toml")
        ctx.verbose = 2
        ctx.color = False
        ctx.config = config

        assert ctx.config_path == Path("peerbump.toml")
        assert ctx.verbose == 2
        assert ctx.color is False
        assert ctx.config is config

    def test_slots_reject_unknown_attributes(self) -> None:
        ctx = PeerBumpContext()

        with pytest.raises(AttributeError):
            ctx.unknown = True  # type: ignore[attr-defined]


@pytest.mark.unit
class TestPassContext:
    """Tests for the pass_context decorator."""

    def test_creates_context_when_missing(self) -> None:
        seen = []

        @click.command()
        @pass_context
        def cmd(ctx: PeerBumpContext) -> None:
            seen.append(ctx)

        result = CliRunner().invoke(cmd, [])

        assert result.exit_code == 0
        assert isinstance(seen[0], PeerBumpContext)

    def test_reuses_existing_context(self) -> None:
        existing = PeerBumpContext()
        existing.verbose = 3
        seen = []

        @click.command()
        @pass_context
        def cmd(ctx: PeerBumpContext) -> None:
            seen.append(ctx)

        CliRunner().invoke(cmd, [], obj=existing)

        assert seen == [existing]
