"""
Logging setup for the entry points.

Library modules only create loggers; handlers are installed once here
by main.py or the API app factory.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger (idempotent)."""
    root = logging.getLogger()
    if not any(getattr(h, "_transfers_handler", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._transfers_handler = True
        root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
