"""Logging setup: stderr plus an append-only log file, never stdout"""

import sys
import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Chatty third-party loggers
QUIET_LOGGERS = ('urllib3', 'websocket')


def configure_logging(log_file: Optional[str] = None, debug: bool = False) -> logging.Logger:
    """
    Configure the root logger for the bridge process

    stdout carries protocol messages only, so every handler writes to
    stderr or the log file.

    Args:
        log_file: Path of the append-only log file (None disables it)
        debug: Log at DEBUG instead of INFO

    Returns:
        The configured root logger
    """
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger()
