"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from mongochan.config.logging import configure_logging


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    mc = logging.getLogger("mongochan")
    mc_level = mc.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    mc.setLevel(mc_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("mongochan").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("mongochan").level == logging.WARNING

    def test_driver_logger_kept_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("pymongo").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("mongochan.test")
        log.info("command.completed", op="fetch", collection="users")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "command.completed"
        assert parsed["op"] == "fetch"
        assert parsed["level"] == "info"
        assert parsed["logger"] == "mongochan.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("mongochan.infrastructure.runtime").debug("loop %s stopped", "x")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "loop x stopped"
        assert parsed["level"] == "debug"

    def test_non_verbose_suppresses_debug(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        structlog.get_logger("mongochan.test").debug("hidden")
        assert capfd.readouterr().err == ""
