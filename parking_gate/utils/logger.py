# parking_gate/utils/logger.py
"""
Logging for the gate backend: console plus a rotating file under LOG_DIR.
Every module calls get_logger(__name__); the root logger is set up on first use.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from parking_gate.config import settings

FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-request access lines and SQL echo drown out the [ENTRY]/[EXIT] trail
QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine")

_configured = False


def log_dir() -> str:
    if settings.LOG_DIR:
        return settings.LOG_DIR
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(project_root, "logs")


def _handlers(level: str) -> list:
    formatter = logging.Formatter(fmt=FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]

    if settings.LOG_TO_FILE:
        directory = log_dir()
        os.makedirs(directory, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=os.path.join(directory, settings.LOG_FILE),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def configure_logging():
    """Attach the gate handlers to the root logger. Runs once per process."""
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    root = logging.getLogger()
    root.setLevel(level)
    for handler in _handlers(level):
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
