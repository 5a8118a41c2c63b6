"""
Logging setup for the call relay.

All modules log through the ``call_relay`` logger. It writes to stdout and to a
size-rotated file under ``logs/`` and does not propagate to the root logger, so
uvicorn's own handlers never print relay records twice.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

from call_relay.config import settings
from call_relay.config.constants import LOGGER_NAME

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_DIR = Path("logs")
LOG_FILE_NAME = "call_relay.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Third-party loggers that are chatty at DEBUG/INFO
NOISY_LOGGERS = ("websockets", "urllib3")


def _file_handler(log_dir: Path, formatter: logging.Formatter) -> RotatingFileHandler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / LOG_FILE_NAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
    )
    handler.setFormatter(formatter)
    return handler


def configure_logging(level: Optional[str] = None, log_dir: Union[str, Path, None] = None) -> logging.Logger:
    """
    Attach console and rotating-file handlers to the relay logger.

    Calling this again replaces the handlers instead of adding more, so the
    app module and ``run.py`` can both call it without duplicating output.

    Args:
        level: Level name such as ``"debug"``; falls back to the LOG_LEVEL setting
        log_dir: Directory for the log file; defaults to ``logs/``

    Returns:
        logging.Logger: The relay logger
    """
    relay_logger = logging.getLogger(LOGGER_NAME)
    relay_logger.setLevel((level or settings.LOG_LEVEL).upper())

    for existing in list(relay_logger.handlers):
        relay_logger.removeHandler(existing)
        existing.close()

    formatter = logging.Formatter(LOG_FORMAT)
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    relay_logger.addHandler(stdout_handler)

    target_dir = Path(log_dir) if log_dir is not None else LOG_DIR
    try:
        relay_logger.addHandler(_file_handler(target_dir, formatter))
    except OSError as e:
        relay_logger.warning(f"File logging disabled, cannot write to {target_dir}: {e}")

    relay_logger.propagate = False
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    relay_logger.debug(f"Logging configured at {logging.getLevelName(relay_logger.level)}")
    return relay_logger
