"""Static, non-interactive text."""

from __future__ import annotations

from typing import Any, Optional

from rich.text import Text

from form_core.errors import TypeMismatch
from form_core.events import Command, KeyEvent
from form_core.models import KIND_LABEL, WidgetDescriptor
from form_core.widgets import LABEL_STYLE, Widget


class StaticLabel(Widget):
    kind = KIND_LABEL

    def __init__(self, descriptor: WidgetDescriptor, sink=None):
        super().__init__(descriptor, sink)
        text = descriptor.label
        if not text and isinstance(descriptor.default, str):
            text = descriptor.default
        self.text = text
        self.initial_value = text

    def can_focus(self) -> bool:
        return False

    def set_focus(self, focused: bool) -> None:
        pass

    def on_key(self, event: KeyEvent) -> Optional[Command]:
        return None

    def is_valid(self) -> bool:
        return True

    def value(self) -> str:
        return self.text

    def set_value(self, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeMismatch(f"{self.name}: expected str, got {type(value).__name__}")
        self.text = value

    def reset(self) -> None:
        self.text = self.initial_value
        self._error = ""

    def render_label(self):
        return None

    def render_body(self):
        return Text(self.text, style=LABEL_STYLE)
