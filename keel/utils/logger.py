"""
Logging configuration for Keel

Modules log through children of the "keel" logger named after their import
path, e.g. keel.storage.database. Only the "keel" logger has a handler, the
children propagate to it, so one call to setup_logger controls the whole
package.
"""
import logging
import sys
from typing import IO, Optional

ROOT_LOGGER = "keel"
DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _keel_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == ROOT_LOGGER:
            return handler
    return None


def setup_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None
) -> logging.Logger:
    """
    Configure the "keel" logger

    The first call installs a stream handler, later calls adjust the level,
    format and stream of that same handler.

    Args:
        level: Log level (default: INFO, or DEBUG if Config.DEBUG is True)
        format_string: Custom format string (optional)
        stream: Where records are written (default: stdout)

    Returns:
        The "keel" logger
    """
    logger = logging.getLogger(ROOT_LOGGER)

    if level is None:
        # Imported here, config imports the logger module
        from ..core.config import Config
        level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(level)

    handler = _keel_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.set_name(ROOT_LOGGER)
        handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
        logger.addHandler(handler)
        # Prevent propagation to root logger
        logger.propagate = False
        return logger

    if stream is not None:
        handler.setStream(stream)
    if format_string is not None:
        handler.setFormatter(logging.Formatter(format_string))
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get the logger for a module

    Args:
        name: Module name (typically __name__). Names outside the keel
            package are placed under it, so "myapp.controllers" logs as
            "keel.myapp.controllers".

    Returns:
        Logger instance
    """
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    if _keel_handler(logging.getLogger(ROOT_LOGGER)) is None:
        setup_logger()
    return logging.getLogger(name)
