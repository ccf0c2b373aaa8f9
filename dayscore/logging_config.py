from __future__ import annotations

import logging
from logging import Logger
from typing import Optional

from .config import settings


def setup_logging(level_name: Optional[str] = None) -> Logger:
    """
    Configure the root handler and the ``dayscore`` logger.

    ``level_name`` overrides settings.LOG_LEVEL; unknown names fall back to
    INFO. SQLAlchemy's engine logger stays at WARNING unless DEBUG is asked
    for, so statements are echoed only when debugging.
    """
    level = getattr(logging, (level_name or settings.LOG_LEVEL).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if level <= logging.DEBUG else logging.WARNING)

    logger = logging.getLogger("dayscore")
    logger.setLevel(level)
    return logger
