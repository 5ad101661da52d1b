"""Boolean toggle widget."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text

from form_core.errors import TypeMismatch
from form_core.events import Command, KeyEvent
from form_core.models import KIND_BOOLEAN, WidgetDescriptor
from form_core.widgets import LABEL_ERROR_STYLE, LABEL_STYLE, Widget

TOGGLE_KEYS = {"space", "enter", "x"}
MSG_REQUIRED = "This option must be checked"


class Checkbox(Widget):
    kind = KIND_BOOLEAN

    def __init__(self, descriptor: WidgetDescriptor, sink=None):
        super().__init__(descriptor, sink)
        self.checked = descriptor.default if isinstance(descriptor.default, bool) else False
        self.initial_value = self.checked

    def on_key(self, event: KeyEvent) -> Optional[Command]:
        if event.key not in TOGGLE_KEYS:
            return None
        self.checked = not self.checked
        self._error = ""
        return Command.REPAINT

    def is_valid(self) -> bool:
        # For checkboxes, required means it must be checked
        if self.required and not self.checked:
            return self._fail(MSG_REQUIRED)
        return self._pass()

    def value(self) -> bool:
        return self.checked

    def set_value(self, value: Any) -> None:
        if not isinstance(value, bool):
            raise TypeMismatch(f"{self.name}: expected bool, got {type(value).__name__}")
        self.checked = value
        self._error = ""

    def reset(self) -> None:
        self.checked = self.initial_value
        self._error = ""
        self.set_focus(False)

    def render_label(self):
        # The label sits on the checkbox line itself.
        return None

    def render_body(self):
        symbol = "[✓]" if self.checked else "[ ]"
        style = LABEL_ERROR_STYLE if self._error else (LABEL_STYLE if self._focused else "")
        return Text(f"{symbol} {self.label}".rstrip(), style=style)
