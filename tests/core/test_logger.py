"""Tests for logger setup."""

import sys

import pytest
from loguru import logger

from cogload.core.logger import setup_logger


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_file_handler_receives_context(tmp_path, restore_logger):
    log_file = tmp_path / "logs" / "cogload.log"

    setup_logger("DEBUG", str(log_file))
    logger.debug("Recovery session started", session_id="abc")
    logger.remove()

    content = log_file.read_text()
    assert "Logger configured" in content
    assert "Recovery session started" in content
    assert "'session_id': 'abc'" in content


def test_level_filters_file_output(tmp_path, restore_logger):
    log_file = tmp_path / "cogload.log"

    setup_logger("WARNING", str(log_file))
    logger.info("quiet")
    logger.warning("loud")
    logger.remove()

    content = log_file.read_text()
    assert "quiet" not in content
    assert "loud" in content
