import logging
import os
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"

# Third-party loggers held at WARNING; Pillow logs every PNG chunk at DEBUG
QUIET_LOGGERS = ("PIL", "pythonosc", "asyncio")


def setup_logging(level: str | None = None, stream: TextIO | None = None) -> logging.Logger:
    """Send the ``cubetimer`` logger tree to one stream handler.

    ``level`` falls back to ``LOG_LEVEL`` from the environment, then INFO.
    Calling it again replaces the handler instead of adding a second one.
    """
    name = level or os.environ.get("LOG_LEVEL") or "INFO"
    numeric_level = logging.getLevelName(name.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))

    logger = logging.getLogger("cubetimer")
    logger.setLevel(numeric_level)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.propagate = False

    for quiet in QUIET_LOGGERS:
        logging.getLogger(quiet).setLevel(logging.WARNING)

    return logger
