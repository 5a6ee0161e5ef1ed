"""Logging setup.

stdout carries the LSP stream, so every sink here writes to stderr.
"""

from __future__ import annotations

import sys
import time
from functools import wraps
from typing import Any, Literal

import loguru

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "{extra[module]} - <level>{message}</level>"
)


def get_logger(name: str) -> Any:
    """Return a loguru logger bound to ``name``."""
    return loguru.logger.bind(module=name)


def setup_logging(level: LogLevel = "INFO") -> None:
    """Replace loguru's default handler with a single stderr sink."""
    loguru.logger.remove()
    loguru.logger.configure(extra={"module": "grammar_lsp"})
    loguru.logger.add(sink=sys.stderr, level=level, format=_FORMAT)


def log_function_duration(name: str | None = None):
    """Log how long a coroutine function took, at debug level.

    Example:
        @log_function_duration()
        async def check_text(self, text): ...
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            func_logger = get_logger(func.__module__)
            func_name = func.__name__ if name is None else name
            start_time = time.monotonic()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.monotonic() - start_time
                func_logger.debug(f"{func_name} completed in: {duration:.2f} seconds")

        return wrapper

    return decorator
