"""Tests for mfaflow logging utilities."""

from __future__ import annotations

import json

import pytest
import structlog

from mfaflow.logging import add_log_level, configure_logging, get_logger


class TestAddLogLevel:
    """Tests for the add_log_level processor."""

    def test_sets_level(self) -> None:
        assert add_log_level(None, "info", {})["level"] == "info"

    def test_translates_warn(self) -> None:
        assert add_log_level(None, "warn", {})["level"] == "warning"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="INFO", json_output=True)
        get_logger("test").info("mfa_test_event", operation="challenge")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "mfa_test_event"
        assert record["operation"] == "challenge"
        assert record["level"] == "info"

    def test_level_filters_events(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="WARNING", json_output=True)
        get_logger("test").info("hidden_event")

        assert "hidden_event" not in capsys.readouterr().err

    def test_console_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(level="DEBUG", json_output=False)
        get_logger("test").debug("console_event")

        assert "console_event" in capsys.readouterr().err

    def test_returns_structlog_logger(self) -> None:
        structlog.reset_defaults()
        assert hasattr(get_logger("test"), "info")
