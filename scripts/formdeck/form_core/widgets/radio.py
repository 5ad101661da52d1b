"""Single-choice option group."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from rich.text import Text

from form_core.errors import InvalidDescriptor, TypeMismatch, UnknownSelectionId
from form_core.events import Command, KeyEvent
from form_core.models import KIND_CHOICE, WidgetDescriptor
from form_core.widgets import Widget

UP_KEYS = {"up", "k"}
DOWN_KEYS = {"down", "j"}
CONFIRM_KEYS = {"enter", "space"}
MSG_REQUIRED = "Select an option"


@dataclass(frozen=True)
class Option:
    id: str
    label: str


def parse_options(descriptor: WidgetDescriptor) -> list[Option]:
    raw = descriptor.options.get("items", [])
    if not isinstance(raw, list):
        raise InvalidDescriptor(f"widget {descriptor.name!r}: options.items must be a list")

    options: list[Option] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            raise InvalidDescriptor(f"widget {descriptor.name!r}: each item must be a mapping")
        option_id = item.get("id")
        label = item.get("label", option_id)
        if not isinstance(option_id, str) or not isinstance(label, str):
            raise InvalidDescriptor(f"widget {descriptor.name!r}: item id and label must be strings")
        if not option_id:
            continue
        if option_id in seen:
            raise InvalidDescriptor(f"widget {descriptor.name!r}: duplicate item id {option_id!r}")
        seen.add(option_id)
        options.append(Option(id=option_id, label=label or option_id))

    if not options:
        raise InvalidDescriptor(f"widget {descriptor.name!r}: a choice group needs at least one item")
    return options


class RadioGroup(Widget):
    """Options with a highlight cursor separate from the confirmed selection.

    ``value()`` is the selected option's id, never its position.
    """

    kind = KIND_CHOICE

    def __init__(self, descriptor: WidgetDescriptor, sink=None):
        super().__init__(descriptor, sink)
        self.options = parse_options(descriptor)
        self.selected = -1
        if isinstance(descriptor.default, str):
            self.selected = self._index_of(descriptor.default)
        self.initial_selected = self.selected
        self.cursor = max(0, self.selected)

    def _index_of(self, option_id: str) -> int:
        for i, option in enumerate(self.options):
            if option.id == option_id:
                return i
        return -1

    @property
    def initial_value(self) -> str:
        return self.options[self.initial_selected].id if self.initial_selected >= 0 else ""

    def on_key(self, event: KeyEvent) -> Optional[Command]:
        name = event.key
        if name in UP_KEYS:
            self.cursor = max(0, self.cursor - 1)
        elif name in DOWN_KEYS:
            self.cursor = min(len(self.options) - 1, self.cursor + 1)
        elif name in CONFIRM_KEYS:
            self.selected = self.cursor
            self._error = ""
        else:
            return None
        return Command.REPAINT

    def is_valid(self) -> bool:
        if self.required and self.selected == -1:
            return self._fail(MSG_REQUIRED)
        return self._pass()

    def value(self) -> str:
        if self.selected == -1:
            return ""
        return self.options[self.selected].id

    def set_value(self, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeMismatch(f"{self.name}: expected option id (str), got {type(value).__name__}")
        if value == "":
            self.selected = -1
            self._error = ""
            return
        index = self._index_of(value)
        if index == -1:
            raise UnknownSelectionId(f"{self.name}: unknown option id {value!r}")
        self.selected = index
        self.cursor = index
        self._error = ""

    def reset(self) -> None:
        self.selected = self.initial_selected
        self.cursor = max(0, self.initial_selected)
        self._error = ""
        self.set_focus(False)

    def render_body(self):
        text = Text()
        for i, option in enumerate(self.options):
            symbol = "(•)" if i == self.selected else "( )"
            if self._focused and i == self.cursor:
                style = "bold cyan"
            elif i == self.selected:
                style = "cyan"
            else:
                style = ""
            if i:
                text.append("\n")
            text.append(f"{symbol} {option.label}", style=style)
        return text
