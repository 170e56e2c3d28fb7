"""
Logging configuration for the API process.

``setup_logging`` attaches a console handler (and, when ``LOG_FILE`` is
set, a size-rotated file handler) to the root logger.  Every module
logs through ``logging.getLogger(__name__)``; request lines are
written by the middleware in ``main``, so uvicorn's own access log is
turned down to warnings.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterable, Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

QUIET_LOGGERS = ("uvicorn.access",)


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    quiet: Iterable[str] = QUIET_LOGGERS,
) -> int:
    """Configure the root logger and return the numeric level applied.

    Handlers are attached only once per process; calling this again
    (tests build several apps) just updates the level.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names mean INFO.
    logfile : Optional[str]
        Path of a log file.  Parent directories are created.
    quiet : Iterable[str]
        Logger names capped at WARNING.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    if root.handlers:
        return numeric_level

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    return numeric_level
