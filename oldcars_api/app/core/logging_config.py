"""
Logging for the Old Cars API.

One format is used for everything the process prints: the car service,
the request handlers and uvicorn's own server and access logs.  Uvicorn
is started with ``log_config=None`` (see ``run.py``) and its loggers
are stripped of handlers here so their records propagate to the root
logger configured by :func:`setup_logging`.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def align_uvicorn_loggers(level: int) -> None:
    """Route uvicorn's loggers through the root handlers at ``level``."""
    for name in UVICORN_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(level)


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the service.

    Handlers are attached only once per process; later calls (tests
    build several apps) only re-align the uvicorn loggers.  Unknown
    level names fall back to ``INFO``.  ``logfile``, when given, adds a
    UTF-8 file handler next to the console one.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    align_uvicorn_loggers(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
