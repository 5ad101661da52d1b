"""Shared text formatting helpers for widget labels and values."""

from __future__ import annotations

import io
import re
from typing import Any

from rich.console import Console

TOKEN_LABELS = {
    "api": "API",
    "cpu": "CPU",
    "db": "DB",
    "dns": "DNS",
    "id": "ID",
    "ip": "IP",
    "json": "JSON",
    "ssh": "SSH",
    "ui": "UI",
    "url": "URL",
}

DELIMITER_RE = re.compile(r"[._/\-\s]+")


def label_for_name(name: str | None) -> str:
    """Readable fallback label for widgets declared without one."""
    if not name:
        return ""

    tokens = [t for t in DELIMITER_RE.split(str(name).strip()) if t]
    parts: list[str] = []
    for token in tokens:
        lower = token.lower()
        if lower in TOKEN_LABELS:
            parts.append(TOKEN_LABELS[lower])
        elif token.isupper():
            parts.append(token)
        else:
            parts.append(lower.capitalize())
    return " ".join(parts)


def format_number(value: float) -> str:
    return f"{value:.1f}"


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return format_number(value)
    if value is None or value == "":
        return "-"
    return str(value)


def truncate(text: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(text) <= width:
        return text
    if width == 1:
        return "…"
    return text[: width - 1] + "…"


def render_plain(renderable: Any, width: int = 80) -> str:
    """Render a rich renderable to plain text without touching the terminal."""
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None, force_terminal=False, legacy_windows=False)
    console.print(renderable)
    return buffer.getvalue()
