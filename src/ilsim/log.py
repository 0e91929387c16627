"""Logger set-up for the CLI and for applications embedding the simulator.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by the application.
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

_FORMAT = "%(asctime)s.%(msecs)03d [%(name)s] [%(levelname)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def init_logger(
    name: str = "ilsim",
    log_file: str | Path | None = None,
    level: int | str = logging.WARNING,
) -> logging.Logger:
    """Log *name* to stderr and, when *log_file* is given, to a file rotated at midnight.

    Calling it again only changes the level; handlers are added once.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False
    if logger.handlers:
        return logger

    formatter = logging.Formatter(_FORMAT, _DATEFMT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            TimedRotatingFileHandler(path, when="midnight", backupCount=7, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
