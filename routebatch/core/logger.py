# routebatch/core/logger.py
import sys

from loguru import logger

from routebatch.core.config import settings
from routebatch.core.logging_config import setup_logging

# Service default: stdout at the configured level. The CLI reconfigures to stderr.
setup_logging(settings.LOG_LEVEL, sys.stdout)

__all__ = ["logger"]
