from __future__ import annotations

import io
import os
import pytest
import logging
from typing import Generator
from unittest.mock import MagicMock, patch

from peerbump.utils.logger import (
    NOTICE,
    ColoredFormatter,
    get_logger,
    is_logging_configured,
    setup_logging,
)


@pytest.fixture
def clean_logger_state() -> Generator[None, None, None]:
    """Reset the ``peerbump`` logger and the configured flag around a test."""
    import peerbump.utils.logger as logger_module

    root_logger = logging.getLogger("peerbump")
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    logger_module._logging_configured = False

    yield

    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)
    root_logger.propagate = True
    logger_module._logging_configured = False


def _record(level: int = logging.INFO, msg: str = "Test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.mark.unit
class TestNoticeLevel:
    def test_value_between_info_and_warning(self) -> None:
        assert logging.INFO < NOTICE < logging.WARNING

    def test_level_name_registered(self) -> None:
        assert logging.getLevelName(NOTICE) == "NOTICE"


@pytest.mark.unit
class TestColoredFormatter:
    def test_format_with_color_enabled(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=True)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            result = formatter.format(_record())

        assert "\033[42m" in result
        assert "INFO" in result
        assert "Test message" in result

    def test_format_with_color_disabled(self) -> None:
        formatter = ColoredFormatter("%(levelname)s: %(message)s", use_color=False)

        assert formatter.format(_record()) == "INFO: Test message"

    def test_notice_has_a_color(self) -> None:
        formatter = ColoredFormatter("%(levelname)s", use_color=True)

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            result = formatter.format(_record(level=NOTICE))

        assert ColoredFormatter.COLORS["NOTICE"] in result

    def test_format_preserves_original_record(self) -> None:
        formatter = ColoredFormatter("%(levelname)s", use_color=True)
        record = _record()

        with patch.object(ColoredFormatter, "_should_use_color", return_value=True):
            formatter.format(record)

        assert record.levelname == "INFO"

    def test_should_use_color_no_color_env(self) -> None:
        stream = MagicMock()
        stream.isatty.return_value = True
        formatter = ColoredFormatter("%(message)s", stream=stream)

        with patch.dict(os.environ, {"NO_COLOR": "1"}):
            assert formatter._should_use_color() is False

    def test_should_use_color_ci_env(self) -> None:
        stream = MagicMock()
        stream.isatty.return_value = True
        formatter = ColoredFormatter("%(message)s", stream=stream)

        with patch.dict(os.environ, {"CI": "true"}, clear=True):
            assert formatter._should_use_color() is False

    def test_should_use_color_tty(self) -> None:
        stream = MagicMock()
        stream.isatty.return_value = True
        formatter = ColoredFormatter("%(message)s", stream=stream)

        with patch.dict(os.environ, {}, clear=True):
            assert formatter._should_use_color() is True

    def test_should_use_color_isatty_raises(self) -> None:
        stream = MagicMock()
        stream.isatty.side_effect = OSError("closed")
        formatter = ColoredFormatter("%(message)s", stream=stream)

        with patch.dict(os.environ, {}, clear=True):
            assert formatter._should_use_color() is False


@pytest.mark.unit
class TestSetupLogging:
    def test_setup_default_config(self, clean_logger_state: None) -> None:
        setup_logging()

        root_logger = logging.getLogger("peerbump")
        assert root_logger.level == logging.INFO
        assert len(root_logger.handlers) == 1
        assert root_logger.propagate is False

    def test_setup_clears_previous_handlers(self, clean_logger_state: None) -> None:
        setup_logging()
        setup_logging(level=logging.DEBUG)

        root_logger = logging.getLogger("peerbump")
        assert len(root_logger.handlers) == 1
        assert root_logger.level == logging.DEBUG

    def test_setup_actual_logging_output(self, clean_logger_state: None) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("core.updater").info("Updating %d package(s)", 2)

        assert stream.getvalue() == "INFO: Updating 2 package(s)\n"

    def test_setup_filters_debug_at_info_level(self, clean_logger_state: None) -> None:
        stream = io.StringIO()
        setup_logging(level=logging.INFO, stream=stream)

        get_logger("core.resolver").debug("hidden")

        assert stream.getvalue() == ""

    def test_notice_passes_warning_threshold_only_when_enabled(
        self, clean_logger_state: None
    ) -> None:
        stream = io.StringIO()
        setup_logging(level=NOTICE, stream=stream)

        get_logger().info("hidden")
        get_logger().log(NOTICE, "Dry run")

        assert stream.getvalue() == "NOTICE: Dry run\n"

    def test_setup_verbose_format(self, clean_logger_state: None) -> None:
        stream = io.StringIO()
        setup_logging(verbose=True, stream=stream)

        get_logger("cli").warning("careful")

        assert "peerbump.cli - WARNING - careful" in stream.getvalue()

    def test_setup_sets_configured_flag(self, clean_logger_state: None) -> None:
        assert is_logging_configured() is False

        setup_logging()

        assert is_logging_configured() is True


@pytest.mark.unit
class TestGetLogger:
    def test_get_logger_no_name(self, clean_logger_state: None) -> None:
        assert get_logger().name == "peerbump"

    def test_get_logger_with_simple_name(self, clean_logger_state: None) -> None:
        assert get_logger("core.graph").name == "peerbump.core.graph"

    def test_get_logger_with_qualified_name(self, clean_logger_state: None) -> None:
        assert get_logger("peerbump.cli").name == "peerbump.cli"

    def test_get_logger_adds_null_handler(self, clean_logger_state: None) -> None:
        logger = get_logger("unconfigured.module")

        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

    def test_get_logger_same_instance(self, clean_logger_state: None) -> None:
        assert get_logger("config") is get_logger("config")
