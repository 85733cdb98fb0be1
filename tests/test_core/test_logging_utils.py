"""Tests for char_diff.logging_utils."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from char_diff.logging_utils import PACKAGE_LOGGER, configure_logging

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers = logger.handlers[:]
    level = logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestConfigureLogging:
    """Verify handler setup on the package logger."""

    def test_level_name(self) -> None:
        logger = configure_logging("debug")
        assert logger.name == "char_diff"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_numeric_level(self) -> None:
        assert configure_logging(logging.ERROR).level == logging.ERROR

    def test_unknown_name_falls_back_to_info(self) -> None:
        assert configure_logging("chatty").level == logging.INFO

    def test_root_logger_untouched(self) -> None:
        root = logging.getLogger()
        before = root.handlers[:]
        configure_logging("DEBUG")
        assert root.handlers == before

    def test_repeated_calls_replace_handlers(self) -> None:
        configure_logging("INFO")
        logger = configure_logging("INFO")
        assert len(logger.handlers) == 1

    def test_records_still_propagate(self, caplog: pytest.LogCaptureFixture) -> None:
        configure_logging("INFO")
        with caplog.at_level(logging.INFO):
            logging.getLogger("char_diff.core.engine").info("seen by root")
        assert "seen by root" in caplog.text

    def test_trace_format_includes_logger_name(self) -> None:
        logger = configure_logging("INFO", trace_mode=True)
        fmt = logger.handlers[0].formatter
        assert fmt is not None
        assert "%(name)s" in fmt._fmt  # type: ignore[operator]

    def test_log_file(self, tmp_path: Path) -> None:
        path = tmp_path / "char-diff.log"
        logger = configure_logging("INFO", str(path))
        assert len(logger.handlers) == 2
        logging.getLogger("char_diff.core.calculator").info("hello file")
        for handler in logger.handlers:
            handler.flush()
        assert "hello file" in path.read_text(encoding="utf-8")

    def test_unwritable_log_file_keeps_console(self, tmp_path: Path) -> None:
        logger = configure_logging("INFO", str(tmp_path / "missing" / "x.log"))
        assert len(logger.handlers) == 1
