"""Tests for repocast.logging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from repocast.logging import ComponentFormatter, configure_logging, get_logger


@pytest.fixture(autouse=True)
def _reset_repocast_logger():
    yield
    logger = logging.getLogger("repocast")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def _record(name: str, message: str) -> logging.LogRecord:
    return logging.LogRecord(name, logging.INFO, __file__, 1, message, None, None)


def test_component_formatter_strips_package_prefix() -> None:
    formatter = ComponentFormatter("%(component)s: %(message)s")

    assert formatter.format(_record("repocast.citations.pipeline", "3 citations")) == (
        "citations.pipeline: 3 citations"
    )
    assert formatter.format(_record("repocast", "hello")) == "main: hello"
    assert formatter.format(_record("uvicorn.error", "boot")) == "uvicorn.error: boot"


def test_get_logger_nests_under_repocast() -> None:
    assert get_logger("analysis.indexing").name == "repocast.analysis.indexing"
    assert get_logger().name == "repocast"


def test_configure_logging_writes_file_sink(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    configure_logging(verbose=True, log_file=log_file)

    get_logger("orchestrator").debug("Starting episode generation for acme/shortener@main")
    for handler in logging.getLogger("repocast").handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "repocast.orchestrator" in text
    assert "Starting episode generation" in text


def test_configure_logging_replaces_handlers_and_quiets_libraries() -> None:
    configure_logging()
    logger = configure_logging(quiet=("repocast-test-noisy",))

    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO
    assert logging.getLogger("repocast-test-noisy").level == logging.WARNING
