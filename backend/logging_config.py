"""Logging setup shared by the API process and scripts."""

import logging
from typing import Optional

from config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s  %(message)s"

QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "urllib3",
)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger.

    The thread name is part of every line so refresh workers
    ("price-refresh_N") can be told apart from request handlers.

    Args:
        level: Overrides settings.LOG_LEVEL, e.g. for a script's --verbose flag.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        level=getattr(logging, level_name),
        force=True,
    )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
