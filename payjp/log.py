"""
Logger collaborator for the PAY.JP SDK.

The client accepts any object exposing ``debug/info/warning/error(msg, *args)``
with printf-style arguments, so a stdlib ``logging.Logger`` can be passed in
directly. Nothing is logged unless a logger is supplied.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

LOGGER_NAME = "payjp"


@runtime_checkable
class LoggerInterface(Protocol):
    def debug(self, msg: str, *args: Any) -> None: ...

    def info(self, msg: str, *args: Any) -> None: ...

    def warning(self, msg: str, *args: Any) -> None: ...

    def error(self, msg: str, *args: Any) -> None: ...


class _NullLogger:
    """Discards every message."""

    def debug(self, msg: str, *args: Any) -> None:
        pass

    def info(self, msg: str, *args: Any) -> None:
        pass

    def warning(self, msg: str, *args: Any) -> None:
        pass

    def error(self, msg: str, *args: Any) -> None:
        pass

    def __repr__(self) -> str:
        return "NullLogger"


NullLogger: LoggerInterface = _NullLogger()


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return the SDK's stdlib logger; configure handlers in your application."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


__all__ = ["LoggerInterface", "NullLogger", "get_logger", "LOGGER_NAME"]
