"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest

from elastorm.config.settings import ObservabilitySettings
from elastorm.observability.logging import setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _last_line(capsys: pytest.CaptureFixture[str]) -> str:
    return capsys.readouterr().err.strip().splitlines()[-1]


class TestSetupLogging:
    def test_module_logs_render_as_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(ObservabilitySettings(log_format="json"))
        logging.getLogger("elastorm.adapters.base.registry").info("Registered connection: %s", "main")

        entry = json.loads(_last_line(capsys))
        assert entry["event"] == "Registered connection: main"
        assert entry["level"] == "info"
        assert entry["logger"] == "elastorm.adapters.base.registry"
        assert "timestamp" in entry

    def test_console_format_is_not_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(ObservabilitySettings(log_format="console"))
        logging.getLogger("elastorm.cli").warning("Dropped index: %s", "user")

        line = _last_line(capsys)
        assert "Dropped index: user" in line
        with pytest.raises(json.JSONDecodeError):
            json.loads(line)

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(ObservabilitySettings(log_level="warning"))
        logging.getLogger("elastorm.core").info("hidden")
        assert "hidden" not in capsys.readouterr().err

    def test_repeated_setup_keeps_one_handler(self) -> None:
        setup_logging()
        setup_logging()
        named = [h for h in logging.getLogger().handlers if h.get_name() == "elastorm"]
        assert len(named) == 1
