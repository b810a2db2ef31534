"""Unit tests for logging setup."""

import sys

from loguru import logger

from node_deposit.initialization.logging import setup_logging


def test_setup_logging_writes_file(tmp_path) -> None:
    """Records at or above the level reach the file sink."""
    log_file = tmp_path / "logs" / "node_deposit.log"

    try:
        setup_logging(level="INFO", log_file=str(log_file))
        logger.debug("hidden")
        logger.warning("deposit check failed")
    finally:
        logger.remove()
        logger.add(sys.stderr)

    content = log_file.read_text()
    assert "deposit check failed" in content
    assert "hidden" not in content
