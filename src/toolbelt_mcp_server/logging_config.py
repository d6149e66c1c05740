"""Logging setup for the toolbelt MCP server.

Standard output carries protocol frames when serving over stdio, so every log
record is written to standard error.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_HANDLER_NAME = "toolbelt-mcp-stderr"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a single standard-error handler to the root logger.

    Calling this more than once only updates the level.

    Args:
        level: Log level name or number.

    Returns:
        The root logger the handler is attached to.

    """
    root = logging.getLogger()
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    if not any(handler.get_name() == _HANDLER_NAME for handler in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root
