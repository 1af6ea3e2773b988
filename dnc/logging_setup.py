"""Logging setup.

All modules log through ``logging.getLogger(__name__)`` under the ``dnc``
namespace. Output goes to stderr so the MCP stdio transport, which owns
stdout, is never corrupted.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Install a single stderr handler on the ``dnc`` logger.

    Calling it again replaces the handler rather than adding another.

    Args:
        level: Level name or number.

    Returns:
        The configured ``dnc`` logger.
    """
    logger = logging.getLogger("dnc")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
