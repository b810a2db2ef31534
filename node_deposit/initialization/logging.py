"""
Initialization - Logging Module.

Configures loguru logger with a stderr sink and a rotating file sink.
"""

import sys

from loguru import logger


def setup_logging(level: str = "INFO", log_file: str | None = "logs/node_deposit.log") -> None:
    """
    Configure logger with file rotation.

    Args:
        level: Minimum log level for all sinks
        log_file: Rotating log file path, or None for stderr only
    """
    logger.remove()
    logger.add(sys.stderr, level=level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )

    logger.info("Starting node deposit guard...")
