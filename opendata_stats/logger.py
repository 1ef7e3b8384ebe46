import logging
import os
import sys

ROOT_LOGGER_NAME = "opendata_stats"


def get_logger(name: str = None) -> logging.Logger:
    """
    Return a logger under the package namespace.

    The package root logger gets a single stderr handler the first time it
    is requested; child loggers propagate to it.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        root.setLevel(os.getenv("ODSTATS_LOG_LEVEL", "INFO").upper())
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
        root.propagate = False

    if not name:
        return root
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def set_level(level: int) -> None:
    """Change the package log level (used by the CLI --verbose flag)."""
    get_logger().setLevel(level)
