"""Tests for logging setup."""

import logging
import logging.handlers

import pytest

from src.logging_config import LOG_FILE_NAME, setup_logging


@pytest.fixture
def root_handlers():
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _file_handlers(root):
    return [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]


class TestSetupLogging:
    def test_writes_to_rotating_file(self, tmp_path, root_handlers):
        log_file = setup_logging(log_dir=tmp_path, console=False)

        logging.getLogger("src.team_builder.session").debug("roster hydrated")
        for handler in _file_handlers(root_handlers):
            handler.flush()

        assert log_file == tmp_path / LOG_FILE_NAME
        assert "roster hydrated" in log_file.read_text(encoding="utf-8")

    def test_second_call_adds_no_handlers(self, tmp_path, root_handlers):
        setup_logging(log_dir=tmp_path)
        count = len(root_handlers.handlers)

        setup_logging(log_dir=tmp_path)

        assert len(root_handlers.handlers) == count
        assert len(_file_handlers(root_handlers)) == 1
