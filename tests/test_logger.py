"""
Logger output format and level filtering
"""

import pytest

from models.enums import LogCategory, LogLevel
from utils.logger import Logger, configure_logger, get_category_logger, get_logger


@pytest.fixture
def logger():
    return Logger(min_level=LogLevel.DEBUG, use_colors=False)


def test_message_line_format(logger, capsys):
    logger.info(LogCategory.STORE, "Animation loaded")

    line = capsys.readouterr().out.strip()
    assert line.startswith("[")
    assert "STORE" in line
    assert line.endswith("✓ Animation loaded")


def test_details_render_as_tree(logger, capsys):
    logger.info(LogCategory.STREAM, "Session started", animation="fire", interval_ms=40)

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert lines[1].strip() == "├─ animation: fire"
    assert lines[2].strip() == "└─ interval_ms: 40"


def test_level_filtering(capsys):
    logger = Logger(min_level=LogLevel.WARN, use_colors=False)

    logger.debug(LogCategory.API, "hidden")
    logger.info(LogCategory.API, "hidden")
    logger.warn(LogCategory.API, "shown")
    logger.error(LogCategory.API, "shown too")

    out = capsys.readouterr().out
    assert "hidden" not in out
    assert "⚠ shown" in out
    assert "✗ shown too" in out


def test_colors_can_be_disabled(logger, capsys):
    logger.error(LogCategory.SYSTEM, "plain")

    assert "\033[" not in capsys.readouterr().out


def test_exc_info_appends_traceback(logger, capsys):
    try:
        raise ValueError("boom")
    except ValueError:
        logger.error(LogCategory.SYSTEM, "Failure", exc_info=True)

    out = capsys.readouterr().out
    assert "Traceback" in out
    assert "ValueError: boom" in out


def test_exc_info_outside_handler_adds_nothing(logger, capsys):
    logger.error(LogCategory.SYSTEM, "No exception", exc_info=True)

    assert len(capsys.readouterr().out.splitlines()) == 1


def test_bound_logger_uses_category(capsys):
    configure_logger(LogLevel.DEBUG, use_colors=False)
    try:
        get_category_logger(LogCategory.ASSETS).warn("Cannot list root", root="/tmp/frames")
        out = capsys.readouterr().out
    finally:
        configure_logger(LogLevel.INFO, use_colors=True)

    assert "ASSETS" in out
    assert "root: /tmp/frames" in out


def test_configure_logger_updates_singleton_in_place():
    logger = get_logger()
    bound = logger.for_category(LogCategory.API)

    configure_logger(LogLevel.ERROR, use_colors=False)
    try:
        assert get_logger() is logger
        assert logger.min_level is LogLevel.ERROR
        assert bound._base is logger
    finally:
        configure_logger(LogLevel.INFO, use_colors=True)
