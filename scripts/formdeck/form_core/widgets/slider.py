"""Numeric range widget."""

from __future__ import annotations

import math
from typing import Any, Optional

from rich.text import Text

from form_core.errors import InvalidDescriptor, RangeError, TypeMismatch
from form_core.events import Command, KeyEvent
from form_core.formatting import format_number
from form_core.models import KIND_RANGE, WidgetDescriptor
from form_core.widgets import HELP_STYLE, Widget

DOWN_KEYS = {"left", "h", "-"}
UP_KEYS = {"right", "l", "+"}
BAR_WIDTH = 30


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: float) -> bool:
    return isinstance(value, int) or math.isfinite(value)


def _number_option(descriptor: WidgetDescriptor, key: str, fallback: float) -> float:
    raw = descriptor.options.get(key, fallback)
    if not _is_number(raw) or not _is_finite(raw):
        raise InvalidDescriptor(f"widget {descriptor.name!r}: {key} must be a finite number")
    return float(raw)


class Slider(Widget):
    """Bounded number; every mutation clamps, so it is valid by construction."""

    kind = KIND_RANGE

    def __init__(self, descriptor: WidgetDescriptor, sink=None):
        super().__init__(descriptor, sink)
        self.min = _number_option(descriptor, "min", 0.0)
        self.max = _number_option(descriptor, "max", 100.0)
        self.step = _number_option(descriptor, "step", 1.0)
        if self.min >= self.max:
            raise InvalidDescriptor(f"widget {self.name!r}: min must be less than max")
        if self.step <= 0:
            raise InvalidDescriptor(f"widget {self.name!r}: step must be positive")

        width = descriptor.options.get("width", BAR_WIDTH)
        self.bar_width = width if isinstance(width, int) and not isinstance(width, bool) and width > 0 else BAR_WIDTH

        self.current = self.min
        default = descriptor.default
        if _is_number(default) and self.min <= default <= self.max:
            self.current = float(default)
        self.initial_value = self.current

    def _clamp(self, value: float) -> float:
        return min(self.max, max(self.min, value))

    def on_key(self, event: KeyEvent) -> Optional[Command]:
        name = event.key
        if name in DOWN_KEYS:
            self.current = self._clamp(self.current - self.step)
        elif name in UP_KEYS:
            self.current = self._clamp(self.current + self.step)
        elif name == "home":
            self.current = self.min
        elif name == "end":
            self.current = self.max
        else:
            return None
        self._error = ""
        return Command.REPAINT

    def is_valid(self) -> bool:
        return self._pass()

    def value(self) -> float:
        return self.current

    def set_value(self, value: Any) -> None:
        if not _is_number(value):
            raise TypeMismatch(f"{self.name}: expected a number, got {type(value).__name__}")
        if not (_is_finite(value) and self.min <= value <= self.max):
            raise RangeError(
                f"{self.name}: {value} outside [{format_number(self.min)}, {format_number(self.max)}]"
            )
        self.current = float(value)
        self._error = ""

    def reset(self) -> None:
        self.current = self.initial_value
        self._error = ""
        self.set_focus(False)

    def render_body(self):
        ratio = (self.current - self.min) / (self.max - self.min)
        filled = min(self.bar_width, max(0, int(self.bar_width * ratio)))
        text = Text()
        text.append("━" * filled, style="cyan" if self._focused else "white")
        text.append("━" * (self.bar_width - filled), style="grey37")
        text.append(f" {format_number(self.current)}")
        text.append(f"\nMin: {format_number(self.min)} | Max: {format_number(self.max)}", style=HELP_STYLE)
        return text
