"""Linear form with a submit gate."""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from rich.console import Group
from rich.text import Text

from form_core.containers import FlatContainer, navigation_hint
from form_core.diagnostics import DiagnosticSink
from form_core.errors import InvalidDescriptor
from form_core.events import Command, KeyEvent
from form_core.factory import build_all
from form_core.models import ContainerDescriptor
from form_core.profiles import KeyMap
from form_core.widgets import ERROR_STYLE

logger = logging.getLogger(__name__)

NAV_ACTIONS = (("focus_next", "next"), ("focus_prev", "previous"), ("quit", "quit"))


class Form(FlatContainer):
    def __init__(
        self,
        widgets,
        title: str = "",
        description: str = "",
        keymap: Optional[KeyMap] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        super().__init__(widgets, title, description, keymap, sink)
        self.submitted = False

    @classmethod
    def from_descriptor(
        cls,
        descriptor: Union[ContainerDescriptor, dict[str, Any]],
        keymap: Optional[KeyMap] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> "Form":
        if not isinstance(descriptor, ContainerDescriptor):
            descriptor = ContainerDescriptor.from_dict(descriptor)
        if not descriptor.widgets:
            raise InvalidDescriptor("a form needs at least one widget")
        widgets = build_all(descriptor.widgets, sink)
        return cls(widgets, descriptor.title, descriptor.description, keymap, sink)

    def handle_action(self, event: KeyEvent) -> Optional[Command]:
        if not self.keymap.matches("submit", event.key):
            return None
        if self.can_submit():
            self.submitted = True
            logger.debug("form %r submitted", self.title)
            return Command.QUIT
        logger.debug("form %r submit blocked by validation", self.title)
        self.validate_all()
        return Command.REPAINT

    def can_submit(self) -> bool:
        return self.validate_all()

    def reset(self) -> None:
        super().reset()
        self.submitted = False

    def render(self):
        if self.quitting:
            return Text("")

        parts = self.header()
        parts.extend(self.panels())
        if any(widget.error for widget in self.widgets):
            parts.append(Text("Fix the highlighted fields before submitting", style=ERROR_STYLE))
        submit_keys = "/".join(sorted(self.keymap.bindings.get("submit", ()))) or "submit"
        parts.append(Text(f"[ Submit ({submit_keys}) ]", style="bold green"))
        parts.append(navigation_hint(self.keymap, NAV_ACTIONS))
        return Group(*parts)
