"""Tab set: named widget groups, one active at a time."""

from __future__ import annotations

import json
import logging
from itertools import combinations
from typing import Any, Optional, Sequence, Union

from rich.console import Group
from rich.text import Text

from form_core.containers import broadcast_resize, collect_validation, navigation_hint, serialize_widgets
from form_core.diagnostics import DiagnosticSink, emit
from form_core.errors import InvalidDescriptor
from form_core.events import Command, Event, KeyEvent, ResizeEvent
from form_core.factory import build_all
from form_core.focus import FocusCursor
from form_core.formatting import format_value, truncate
from form_core.models import Diagnostic, TabSetDescriptor, ValidationSnapshot
from form_core.profiles import KeyMap, default_keymap
from form_core.widgets import Widget, framed

logger = logging.getLogger(__name__)

TAB_LABEL_WIDTH = 24
NAV_ACTIONS = (
    ("group_next", "next tab"),
    ("group_prev", "previous tab"),
    ("focus_next", "next field"),
    ("quit", "quit"),
)


class TabGroup:
    """A named widget sequence with its own focus cursor."""

    def __init__(self, name: str, label: str, widgets: Sequence[Widget]):
        if not name:
            raise InvalidDescriptor("tab group name must not be empty")
        if not label:
            raise InvalidDescriptor(f"tab group {name!r} needs a label")
        self.name = name
        self.label = label
        self.widgets = list(widgets)
        self.cursor = FocusCursor(self.widgets)

    def focused_widget(self) -> Optional[Widget]:
        return self.cursor.current()

    def is_valid(self) -> bool:
        results = [widget.is_valid() for widget in self.widgets]
        return all(results)

    def has_errors(self) -> bool:
        return any(widget.error for widget in self.widgets)

    def values(self) -> dict[str, Any]:
        return serialize_widgets(self.widgets)

    def reset(self) -> None:
        for widget in self.widgets:
            widget.reset()
        self.cursor.reset()

    def __repr__(self) -> str:
        return f"TabGroup(name={self.name!r}, widgets={len(self.widgets)})"


class TabSet:
    """Groups shown one at a time.

    Group-switching keys only act while the tab set itself holds focus; when it
    does not, keys go straight to the active group's focused widget.
    """

    def __init__(
        self,
        groups: Sequence[TabGroup],
        title: str = "",
        keymap: Optional[KeyMap] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        if not groups:
            raise InvalidDescriptor("a tab set needs at least one group")
        names = [group.name for group in groups]
        if len(set(names)) != len(names):
            raise InvalidDescriptor("tab group names must be unique")
        self.groups = list(groups)
        self.title = title
        self.keymap = keymap or default_keymap()
        self.sink = sink
        self._active = 0
        self.focused = False
        self.quitting = False

    @classmethod
    def from_descriptor(
        cls,
        descriptor: Union[TabSetDescriptor, dict[str, Any]],
        keymap: Optional[KeyMap] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> "TabSet":
        if not isinstance(descriptor, TabSetDescriptor):
            descriptor = TabSetDescriptor.from_dict(descriptor)
        groups = [
            TabGroup(group.name, group.label, build_all(group.widgets, sink))
            for group in descriptor.groups
        ]
        return cls(groups, descriptor.title, keymap, sink)

    # -- groups --------------------------------------------------------

    @property
    def active(self) -> int:
        return self._active

    @active.setter
    def active(self, index: int) -> None:
        self._switch(index)

    def active_group(self) -> TabGroup:
        return self.groups[self._active]

    def group(self, name: str) -> Optional[TabGroup]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def focused_widget(self) -> Optional[Widget]:
        return self.active_group().focused_widget()

    def _switch(self, index: int) -> None:
        index = max(0, min(len(self.groups) - 1, index))
        if index == self._active:
            return
        if self.focused:
            self.active_group().cursor.release()
        logger.debug("tab switch %s -> %s", self.active_group().name, self.groups[index].name)
        self._active = index
        if self.focused:
            self.active_group().cursor.engage()

    def next_group(self) -> None:
        self._switch((self._active + 1) % len(self.groups))

    def prev_group(self) -> None:
        self._switch((self._active - 1) % len(self.groups))

    def jump(self, number: int) -> bool:
        """Activate the 1-based group ``number``; out of range is ignored."""
        if number < 1 or number > len(self.groups):
            return False
        self._switch(number - 1)
        return True

    def set_focus(self, focused: bool) -> None:
        self.focused = bool(focused)
        if self.focused:
            self.active_group().cursor.engage()
        else:
            self.active_group().cursor.release()

    # -- input ---------------------------------------------------------

    def dispatch(self, event: Event) -> Command:
        group = self.active_group()
        if isinstance(event, ResizeEvent):
            return broadcast_resize(group.widgets, event)
        if not isinstance(event, KeyEvent):
            return Command.NONE

        if self.focused:
            name = event.key
            if self.keymap.matches("quit", name):
                self.quitting = True
                return Command.QUIT
            if self.keymap.matches("group_next", name):
                self.next_group()
                return Command.REPAINT
            if self.keymap.matches("group_prev", name):
                self.prev_group()
                return Command.REPAINT
            target = self.keymap.jump_target(name)
            if target is not None:
                self.jump(target)
                return Command.REPAINT
            if self.keymap.matches("focus_next", name):
                group.cursor.focus_next()
                return Command.REPAINT
            if self.keymap.matches("focus_prev", name):
                group.cursor.focus_prev()
                return Command.REPAINT

        widget = group.focused_widget()
        if widget is None:
            return Command.NONE
        return widget.handle_input(event) or Command.NONE

    # -- validation ----------------------------------------------------

    def is_valid(self) -> bool:
        results = [group.is_valid() for group in self.groups]
        return all(results)

    def conflicts(self) -> list[Diagnostic]:
        """One warning per pair of groups sharing a widget name with different values."""
        found = []
        for first, second in combinations(self.groups, 2):
            theirs = {widget.name: widget for widget in second.widgets}
            for widget in first.widgets:
                other = theirs.get(widget.name)
                if other is None:
                    continue
                left, right = widget.value(), other.value()
                if left == right:
                    continue
                found.append(
                    Diagnostic(
                        code="CROSS_GROUP_CONFLICT",
                        message=(
                            f"{widget.name!r} differs between {first.name!r} ({format_value(left)}) "
                            f"and {second.name!r} ({format_value(right)})"
                        ),
                        field=widget.name,
                        severity="warning",
                        context={
                            "groups": [first.name, second.name],
                            "values": [left, right],
                        },
                    )
                )
        return found

    def validation(self) -> ValidationSnapshot:
        snapshot = ValidationSnapshot()
        for group in self.groups:
            part = collect_validation(group.widgets, prefix=f"{group.name}.")
            snapshot.total += part.total
            snapshot.valid += part.valid
            snapshot.invalid += part.invalid
            snapshot.errors.update(part.errors)
            snapshot.diagnostics.extend(part.diagnostics)
            if part.invalid:
                diagnostic = Diagnostic(
                    code="GROUP_VALIDATION_FAILED",
                    message=f"group {group.label!r} has {part.invalid} invalid field(s)",
                    field=group.name,
                    context={"invalid": part.invalid},
                )
                snapshot.diagnostics.append(diagnostic)
                emit(self.sink, diagnostic)

        for diagnostic in self.conflicts():
            logger.debug("conflict: %s", diagnostic.message)
            snapshot.diagnostics.append(diagnostic)
            emit(self.sink, diagnostic)
        return snapshot

    # -- values --------------------------------------------------------

    def value(self) -> dict[str, dict[str, Any]]:
        return {group.name: group.values() for group in self.groups}

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.value(), indent=indent)

    def reset(self) -> None:
        self.set_focus(False)
        for group in self.groups:
            group.reset()
        self._active = 0
        self.quitting = False

    # -- rendering -----------------------------------------------------

    def render_tabs(self) -> Text:
        row = Text()
        for i, group in enumerate(self.groups):
            if i:
                row.append(" │ ", style="grey50")
            label = truncate(group.label, TAB_LABEL_WIDTH)
            if group.has_errors():
                label = f"{label} ⚠"
            if i == self._active:
                row.append(f" {label} ", style="bold black on cyan")
            else:
                row.append(f" {label} ", style="red" if group.has_errors() else "")
        return row

    def render(self):
        if self.quitting:
            return Text("")
        parts = []
        if self.title:
            parts.append(Text(self.title, style="bold cyan"))
        parts.append(self.render_tabs())
        for widget in self.active_group().widgets:
            parts.append(framed(widget, widget.focused))
        parts.append(navigation_hint(self.keymap, NAV_ACTIONS))
        return Group(*parts)
