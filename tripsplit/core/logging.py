"""
Logging setup shared by the API process and scripts.

Usage:
    from tripsplit.core.logging import setup_logging
    setup_logging()
    logger = logging.getLogger(__name__)
"""

import logging
import sys

from tripsplit.core.config import settings


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Driver loggers that are too chatty at INFO
NOISY_LOGGERS = [
    "pymongo",
    "motor",
    "asyncio",
    "httpx",
    "httpcore",
]


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Configure the root logger with a single console handler.

    Safe to call more than once: existing handlers are replaced, not stacked.

    Args:
        level: Log level name or number. Defaults to ``settings.LOG_LEVEL``.

    Returns:
        The configured root logger.
    """
    if level is None:
        level = settings.LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
