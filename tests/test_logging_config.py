"""Tests for logging setup helpers."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from motion_engine.utils.logging_config import ENGINE_LOGGER, resolve_level, setup_logging


@pytest.fixture
def clean_root():
    """Root logger; handlers a test installs are closed and removed afterwards."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    engine = logging.getLogger(ENGINE_LOGGER)
    saved_engine_level = engine.level
    yield root
    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
    engine.setLevel(saved_engine_level)


class TestResolveLevel:
    def test_names_and_ints(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level("WARNING") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_falls_back_to_info(self):
        assert resolve_level("chatty") == logging.INFO


class TestSetupLogging:
    def test_file_handler(self, clean_root, tmp_path):
        # basicConfig is a no-op while pytest capture handlers are attached
        clean_root.handlers = []
        log_file = tmp_path / "engine.log"
        setup_logging("info", log_file=str(log_file))
        assert any(isinstance(h, RotatingFileHandler) for h in clean_root.handlers)
        logging.getLogger("motion_engine.test").info("hello file")
        for handler in clean_root.handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()

    def test_engine_level_separate(self, clean_root):
        clean_root.handlers = []
        setup_logging(logging.WARNING, engine_level="debug")
        assert clean_root.level == logging.WARNING
        assert logging.getLogger(ENGINE_LOGGER).level == logging.DEBUG
