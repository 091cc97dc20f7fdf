"""
Logging setup shared by every binfetch module
"""

import logging
import sys
from typing import Optional, Union

ROOT_LOGGER_NAME = "binfetch"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

_handler: Optional[logging.Handler] = None


def _configure_root() -> logging.Logger:
    global _handler

    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is None or _handler not in root.handlers:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(_handler)
        if root.level == logging.NOTSET:
            root.setLevel(logging.INFO)
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the binfetch hierarchy.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger whose output goes through the shared binfetch handler
    """
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: Union[str, int]) -> None:
    """Set the level for all binfetch loggers"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    _configure_root().setLevel(level)
