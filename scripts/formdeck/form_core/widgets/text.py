"""Single-line and multi-line text widgets."""

from __future__ import annotations

import re
from typing import Any, Optional

from rich.constrain import Constrain
from rich.text import Text

from form_core.errors import InvalidDescriptor, RangeError, TypeMismatch
from form_core.events import Command, KeyEvent, ResizeEvent
from form_core.layout import field_width
from form_core.models import KIND_MULTILINE, KIND_TEXT, WidgetDescriptor
from form_core.widgets import Widget

MSG_REQUIRED = "This field is required"
MSG_MIN_LENGTH = "Minimum of {} characters"
MSG_MAX_LENGTH = "Maximum of {} characters"
MSG_PATTERN = "Invalid format"


def _length_option(descriptor: WidgetDescriptor, key: str) -> int:
    raw = descriptor.options.get(key, 0)
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise InvalidDescriptor(f"widget {descriptor.name!r}: {key} must be a non-negative integer")
    return raw


class _TextWidget(Widget):
    """Editable buffer with an insertion cursor and length/pattern rules."""

    supports_pattern = False

    def __init__(self, descriptor: WidgetDescriptor, sink=None):
        super().__init__(descriptor, sink)
        self.placeholder = descriptor.placeholder
        self.min_length = _length_option(descriptor, "min_length")
        self.max_length = _length_option(descriptor, "max_length")
        if self.max_length and self.min_length > self.max_length:
            raise InvalidDescriptor(f"widget {self.name!r}: min_length is greater than max_length")

        self.pattern: Optional[re.Pattern] = None
        raw_pattern = descriptor.options.get("pattern")
        if self.supports_pattern and raw_pattern is not None:
            if not isinstance(raw_pattern, str):
                raise InvalidDescriptor(f"widget {self.name!r}: pattern must be a string")
            try:
                self.pattern = re.compile(raw_pattern)
            except re.error as exc:
                raise InvalidDescriptor(f"widget {self.name!r}: invalid pattern: {exc}") from exc

        default = descriptor.default if isinstance(descriptor.default, str) else ""
        if self.max_length and len(default) > self.max_length:
            raise InvalidDescriptor(f"widget {self.name!r}: default is longer than max_length")

        self._value = default
        self._cursor = len(default)
        self.initial_value = default
        self.editing = False

    def set_focus(self, focused: bool) -> None:
        super().set_focus(focused)
        self.editing = self._focused
        if self.editing:
            self._cursor = len(self._value)

    @property
    def cursor(self) -> int:
        return self._cursor

    def _insert(self, text: str) -> None:
        if self.max_length and len(self._value) + len(text) > self.max_length:
            return
        self._value = self._value[: self._cursor] + text + self._value[self._cursor :]
        self._cursor += len(text)

    def on_key(self, event: KeyEvent) -> Optional[Command]:
        name = event.key
        if name == "backspace":
            if self._cursor > 0:
                self._value = self._value[: self._cursor - 1] + self._value[self._cursor :]
                self._cursor -= 1
        elif name == "delete":
            self._value = self._value[: self._cursor] + self._value[self._cursor + 1 :]
        elif name == "left":
            self._cursor = max(0, self._cursor - 1)
        elif name == "right":
            self._cursor = min(len(self._value), self._cursor + 1)
        elif name == "home":
            self._cursor = 0
        elif name == "end":
            self._cursor = len(self._value)
        elif name == "ctrl+u":
            self._value = ""
            self._cursor = 0
        elif not self.handle_extra_key(name):
            char = event.printable
            if char is None:
                return None
            self._insert(char)
        # Any edit or cursor move hides the stale error until the next validation.
        self._error = ""
        return Command.REPAINT

    def handle_extra_key(self, name: str) -> bool:
        return False

    def is_valid(self) -> bool:
        value = self._value
        if self.required and not value.strip():
            return self._fail(MSG_REQUIRED)
        if value == "":
            return self._pass()
        if self.min_length and len(value) < self.min_length:
            return self._fail(MSG_MIN_LENGTH.format(self.min_length))
        if self.max_length and len(value) > self.max_length:
            return self._fail(MSG_MAX_LENGTH.format(self.max_length))
        if self.pattern is not None and not self.pattern.search(value):
            return self._fail(MSG_PATTERN)
        return self._pass()

    def value(self) -> str:
        return self._value

    def set_value(self, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeMismatch(f"{self.name}: expected str, got {type(value).__name__}")
        if self.max_length and len(value) > self.max_length:
            raise RangeError(f"{self.name}: value longer than {self.max_length} characters")
        self._value = value
        self._cursor = len(value)
        self._error = ""

    def reset(self) -> None:
        self._value = self.initial_value
        self._cursor = len(self.initial_value)
        self._error = ""
        self.set_focus(False)

    def render_body(self):
        if not self._value and not self.editing:
            return Text(self.placeholder or " ", style="dim italic")
        text = Text(self._value)
        if self.editing:
            if self._cursor >= len(self._value):
                text.append(" ", style="reverse")
            else:
                text.stylize("reverse", self._cursor, self._cursor + 1)
        return text


class TextInput(_TextWidget):
    kind = KIND_TEXT
    supports_pattern = True


class TextArea(_TextWidget):
    kind = KIND_MULTILINE

    def __init__(self, descriptor: WidgetDescriptor, sink=None):
        super().__init__(descriptor, sink)
        self.width = field_width(80)

    def handle_extra_key(self, name: str) -> bool:
        if name in ("enter", "ctrl+j"):
            self._insert("\n")
            return True
        return False

    def on_resize(self, event: ResizeEvent) -> Optional[Command]:
        self.width = field_width(event.width)
        return Command.REPAINT

    def render_body(self):
        return Constrain(super().render_body(), width=self.width)
