"""Responsive sizing decisions by terminal width."""

from __future__ import annotations

NARROW_WIDTH = 100
MIN_FIELD_WIDTH = 30
FIELD_MARGIN = 10


def is_narrow(width: int) -> bool:
    return width < NARROW_WIDTH


def effective_axis(axis: str, width: int | None) -> str:
    """Horizontal rows stack vertically once the terminal is narrow."""
    if axis == "horizontal" and width is not None and is_narrow(width):
        return "vertical"
    return axis


def field_width(width: int) -> int:
    return max(MIN_FIELD_WIDTH, width - FIELD_MARGIN)
