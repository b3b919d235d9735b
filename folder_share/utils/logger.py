# folder_share/utils/logger.py
# File-backed access/error logs for share operations.
# observability/logger.py later switches these handlers to JSON.

import logging
import os
from logging.handlers import RotatingFileHandler

from folder_share import config

ACCESS_LOG = "access.log"
ERROR_LOG = "error.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

os.makedirs(config.LOGS_PATH, exist_ok=True)

_plain_formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", "%Y-%m-%d %H:%M:%S")


def setup_logger(name: str, filename: str, level: int) -> logging.Logger:
    """Logger writing to LOGS_PATH/<filename>, size-rotated, not propagated to root."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # uvicorn --reload imports this module again; keep one handler
    if not logger.handlers:
        handler = RotatingFileHandler(
            os.path.join(config.LOGS_PATH, filename),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUPS,
            encoding="utf-8",
        )
        handler.setFormatter(_plain_formatter)
        logger.addHandler(handler)
    return logger


access_logger = setup_logger("access", ACCESS_LOG, logging.INFO)
error_logger = setup_logger("error", ERROR_LOG, logging.ERROR)


def log_info(message: str) -> None:
    access_logger.info(message)


def log_error(message: str) -> None:
    error_logger.error(message)


def log_exception(e: Exception, context: str = "") -> None:
    """Error log entry with the traceback of `e`. Never echoed to clients."""
    error_logger.error(f"Exception in {context}: {type(e).__name__}", exc_info=e)
