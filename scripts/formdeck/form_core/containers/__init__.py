"""Container helpers shared by forms, layouts and tab groups."""

from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from rich.text import Text

from form_core.diagnostics import DiagnosticSink
from form_core.errors import SerializationError
from form_core.events import Command, Event, KeyEvent, ResizeEvent
from form_core.focus import FocusCursor
from form_core.models import Diagnostic, ValidationSnapshot
from form_core.profiles import KeyMap, default_keymap
from form_core.widgets import HELP_STYLE, Widget, framed


def broadcast_resize(widgets: Sequence[Widget], event: ResizeEvent) -> Command:
    for widget in widgets:
        widget.handle_input(event)
    return Command.REPAINT


def validate_widgets(widgets: Sequence[Widget]) -> bool:
    # Every widget is evaluated so each one refreshes its error message.
    results = [widget.is_valid() for widget in widgets]
    return all(results)


def collect_validation(widgets: Sequence[Widget], prefix: str = "") -> ValidationSnapshot:
    snapshot = ValidationSnapshot(total=len(widgets))
    for widget in widgets:
        key = f"{prefix}{widget.name}"
        if widget.is_valid():
            snapshot.valid += 1
            continue
        snapshot.invalid += 1
        snapshot.errors[key] = widget.error
        snapshot.diagnostics.append(
            Diagnostic(code="VALIDATION_FAILED", message=widget.error, field=key, context={"kind": widget.kind})
        )
    return snapshot


def serialize_widgets(widgets: Sequence[Widget]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for widget in widgets:
        value = widget.value()
        try:
            json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise SerializationError(widget.name, value) from exc
        values[widget.name] = value
    return values


def navigation_hint(keymap: KeyMap, actions: Sequence[tuple[str, str]]) -> Text:
    parts = []
    for action, label in actions:
        bound = sorted(keymap.bindings.get(action, ()))
        if bound:
            parts.append(f"{'/'.join(bound)} {label}")
    return Text(" • ".join(parts), style=HELP_STYLE)


class FlatContainer:
    """Titled widget sequence with a focus cursor, quit keys and resize fan-out.

    Subclasses add their own key actions through ``handle_action`` and their
    own arrangement through ``render``.
    """

    def __init__(
        self,
        widgets: Sequence[Widget],
        title: str = "",
        description: str = "",
        keymap: Optional[KeyMap] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        self.widgets = list(widgets)
        self.title = title
        self.description = description
        self.keymap = keymap or default_keymap()
        self.sink = sink
        self.quitting = False
        self.cursor = FocusCursor(self.widgets)
        self.cursor.engage()

    def focused_widget(self) -> Optional[Widget]:
        return self.cursor.current()

    def widget(self, name: str) -> Optional[Widget]:
        for widget in self.widgets:
            if widget.name == name:
                return widget
        return None

    def dispatch(self, event: Event) -> Command:
        if isinstance(event, ResizeEvent):
            self.on_resize(event)
            return broadcast_resize(self.widgets, event)
        if not isinstance(event, KeyEvent):
            return Command.NONE

        name = event.key
        if self.keymap.matches("quit", name):
            self.quitting = True
            return Command.QUIT
        if self.keymap.matches("focus_next", name):
            self.cursor.focus_next()
            return Command.REPAINT
        if self.keymap.matches("focus_prev", name):
            self.cursor.focus_prev()
            return Command.REPAINT

        handled = self.handle_action(event)
        if handled is not None:
            return handled

        widget = self.focused_widget()
        if widget is None:
            return Command.NONE
        return widget.handle_input(event) or Command.NONE

    def handle_action(self, event: KeyEvent) -> Optional[Command]:
        return None

    def on_resize(self, event: ResizeEvent) -> None:
        pass

    def validate_all(self) -> bool:
        return validate_widgets(self.widgets)

    def validation(self) -> ValidationSnapshot:
        return collect_validation(self.widgets)

    def serialize(self) -> dict[str, Any]:
        return serialize_widgets(self.widgets)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.serialize(), indent=indent)

    def reset(self) -> None:
        for widget in self.widgets:
            widget.reset()
        self.quitting = False
        self.cursor.reset()
        self.cursor.engage()

    def panels(self) -> list:
        return [framed(widget, widget.focused) for widget in self.widgets]

    def header(self) -> list:
        parts = []
        if self.title:
            parts.append(Text(self.title, style="bold cyan"))
        if self.description:
            parts.append(Text(self.description, style=HELP_STYLE))
        return parts
