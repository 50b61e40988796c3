# routebatch/core/logging_config.py
import sys
from typing import Any

from loguru import logger


def setup_logging(level: str = "INFO", sink: Any = sys.stderr) -> None:
    """
    Configure application-wide logging using loguru.

    The CLI logs to stderr so that stdout only carries the JSON output.
    """
    # Remove the handler installed by routebatch.core.logger
    logger.remove()

    logger.add(
        sink,
        level=level.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        backtrace=True,
        diagnose=False,
    )
