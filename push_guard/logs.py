"""Audit logging to ~/.claude/logs, next to the other guard logs."""

import contextlib
import logging

from push_guard import config

LOGGER_NAME = "push_guard"
_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"

_LEVELS = {"off": logging.CRITICAL + 1, "actions": logging.INFO, "all": logging.DEBUG}


def setup_logging():
    """Attach the file handler to the package logger. Safe to call twice.

    Never raises: if the log file can't be opened the tool keeps running
    without file output.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = config.log_level()
    logger.setLevel(_LEVELS[level])
    if level == "off":
        return logger
    if any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        return logger
    path = config.log_path()
    with contextlib.suppress(OSError):
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    return logger
