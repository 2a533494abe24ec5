"""Unit tests for logging setup (archgen.log)."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from rich.logging import RichHandler

from archgen.log import configure_logging, get_logger


pytestmark = pytest.mark.unit


class TestGetLogger:
    def test_root_logger(self):
        assert get_logger().name == "archgen"

    def test_child_logger(self):
        assert get_logger("scaffolder.crud").name == "archgen.scaffolder.crud"


class TestConfigureLogging:
    def test_installs_single_rich_handler(self):
        configure_logging()
        logger = configure_logging()
        assert [type(h) for h in logger.handlers] == [RichHandler]
        assert logger.level == logging.INFO
        assert logger.propagate is False

    def test_verbose_enables_debug(self):
        logger = configure_logging(verbose=True)
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)

    def test_file_sink(self, tmp_path: Path):
        log_file = tmp_path / "logs" / "archgen.log"
        logger = configure_logging(log_file=log_file)
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)

        get_logger("workflow").info("Generated %d file(s)", 3)
        for handler in logger.handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "INFO archgen.workflow: Generated 3 file(s)" in text
