"""Diagnostic sinks and logging setup.

Widgets and containers accept an optional sink at construction time. Running
without one is a normal configuration: diagnostics are then only visible
through ``validation()`` snapshots and the widgets' own error fields.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from form_core.models import Diagnostic

logger = logging.getLogger("form_core")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class DiagnosticSink(Protocol):
    def emit(self, diagnostic: Diagnostic) -> None:
        ...


class CollectingSink:
    """Keeps every diagnostic in memory, newest last."""

    def __init__(self) -> None:
        self.items: list[Diagnostic] = []

    def emit(self, diagnostic: Diagnostic) -> None:
        self.items.append(diagnostic)

    def codes(self) -> list[str]:
        return [d.code for d in self.items]

    def clear(self) -> None:
        self.items.clear()


class LoggingSink:
    """Forwards diagnostics to a logger; warnings stay warnings."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self.log = log or logger

    def emit(self, diagnostic: Diagnostic) -> None:
        level = logging.WARNING if diagnostic.severity == "warning" else logging.INFO
        self.log.log(level, "%s %s: %s", diagnostic.code, diagnostic.field or "-", diagnostic.message)


def emit(sink: Optional[DiagnosticSink], diagnostic: Diagnostic) -> None:
    if sink is not None:
        sink.emit(diagnostic)


def configure_logging(
    level: int | str = logging.WARNING,
    format_str: Optional[str] = None,
    date_format: Optional[str] = None,
) -> logging.Logger:
    """
    Install a single stream handler on the ``form_core`` logger.

    Args:
        level: Logging level name or number
        format_str: Log message format string
        date_format: Date format string
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level}")
        level = resolved

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            format_str or DEFAULT_FORMAT,
            datefmt=date_format or DEFAULT_DATE_FORMAT,
        )
    )

    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
