from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PACKAGE_LOGGER = "patch_replay"


def setup_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Attach a single stderr handler to the package logger.

    Only ``patch_replay.*`` loggers are touched so the operator prompts on
    stdout stay clean and an embedding application keeps its own handlers.
    """
    if isinstance(level, str):
        name = level.strip().upper()
        resolved = int(name) if name.isdigit() else logging.getLevelName(name)
        if not isinstance(resolved, int):
            raise ValueError(f"Unsupported log level: {level}")
        level = resolved
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
