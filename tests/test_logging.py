"""日志配置测试."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from vibe_skills.logging import setup_logging
from vibe_skills.logging.handlers import ColoredConsoleHandler, ErrorOnlyHandler


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_console_only_by_default():
    root = setup_logging()
    assert [type(h) for h in root.handlers] == [ColoredConsoleHandler]
    assert root.level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_verbose_level():
    root = setup_logging(log_level="debug")
    assert root.handlers[0].level == logging.DEBUG


def test_file_handlers(tmp_path):
    root = setup_logging(log_dir=tmp_path / "logs", log_to_file=True)

    assert root.level == logging.DEBUG
    assert {type(h) for h in root.handlers} == {
        ColoredConsoleHandler,
        RotatingFileHandler,
        ErrorOnlyHandler,
    }

    logging.getLogger("vibe_skills.test").error("disk full")
    logging.getLogger("vibe_skills.test").info("installed")
    for handler in root.handlers:
        handler.flush()

    assert "installed" in (tmp_path / "logs" / "vibe-skills.log").read_text(encoding="utf-8")
    error_log = (tmp_path / "logs" / "error.log").read_text(encoding="utf-8")
    assert "disk full" in error_log
    assert "installed" not in error_log


def test_log_to_file_without_dir_is_ignored():
    root = setup_logging(log_to_file=True, log_to_console=False)
    assert root.handlers == []
