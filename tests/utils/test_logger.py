"""Unit tests for the logger factory."""

import logging
from pathlib import Path

import pytest

from moodreel.settings import settings
from moodreel.utils.logger import reset_loggers, setup_logger


@pytest.fixture(autouse=True)
def clean_loggers():
    yield
    reset_loggers()


class TestSetupLogger:
    @staticmethod
    def test_cached_by_name(tmp_path: Path) -> None:
        first = setup_logger("tests.cached", log_dir=tmp_path)
        assert setup_logger("tests.cached") is first

    @staticmethod
    def test_level_by_name(tmp_path: Path) -> None:
        logger = setup_logger("tests.level", level="warning", log_dir=tmp_path)
        assert logger.level == logging.WARNING
        assert not logger.propagate

    @staticmethod
    def test_dated_file_handler(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.logging, "to_file", True)

        logger = setup_logger("tests.file", log_dir=tmp_path)
        logger.info("hello")

        files = list(tmp_path.glob("tests_file_*.log"))
        assert len(files) == 1
        assert "hello" in files[0].read_text(encoding="utf-8")

    @staticmethod
    def test_console_only(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings.logging, "to_file", False)

        logger = setup_logger("tests.console", log_dir=tmp_path)

        assert len(logger.handlers) == 1
        assert not list(tmp_path.iterdir())

    @staticmethod
    def test_reset_closes_handlers(tmp_path: Path) -> None:
        logger = setup_logger("tests.reset", log_dir=tmp_path)
        reset_loggers()
        assert logger.handlers == []
