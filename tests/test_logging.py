"""Tests for rulegen.logging."""

from __future__ import annotations

import logging

import pytest

from rulegen.logging import ROOT_LOGGER, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_rulegen_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def test_console_lines_name_the_component(capsys) -> None:
    configure_logging()

    get_logger("routing.matcher").warning("Skipping %s during matching", "a.md")
    get_logger("routing.matcher").debug("hidden without --verbose")

    assert capsys.readouterr().err == "[rulegen] WARNING routing.matcher: Skipping a.md during matching\n"


def test_reconfiguring_replaces_handlers(capsys) -> None:
    configure_logging()
    logger = configure_logging(verbose=True)

    get_logger("pipeline").debug("Comment matches x.md")

    assert len(logger.handlers) == 1
    assert capsys.readouterr().err == "[rulegen] DEBUG pipeline: Comment matches x.md\n"


def test_file_sink_records_debug_while_console_stays_at_info(tmp_path, capsys) -> None:
    log_file = tmp_path / "nested" / "rulegen.log"
    configure_logging(log_file=log_file)

    get_logger("routing.suggester").debug("Directory candidates: .claude/rules=70")
    get_logger().info("done")

    logged = log_file.read_text(encoding="utf-8")
    assert "DEBUG rulegen.routing.suggester: Directory candidates: .claude/rules=70" in logged
    assert "INFO rulegen: done" in logged
    assert capsys.readouterr().err == "[rulegen] INFO rulegen: done\n"
