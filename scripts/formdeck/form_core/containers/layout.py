"""Directional layout: widgets side by side or stacked, no submit step."""

from __future__ import annotations

from typing import Any, Optional, Union

from rich.columns import Columns
from rich.console import Group

from form_core.containers import FlatContainer, navigation_hint
from form_core.diagnostics import DiagnosticSink
from form_core.errors import InvalidDescriptor
from form_core.events import ResizeEvent
from form_core.factory import build_all
from form_core.layout import effective_axis
from form_core.models import LAYOUT_AXES, ContainerDescriptor
from form_core.profiles import KeyMap

NAV_ACTIONS = (("focus_next", "next"), ("focus_prev", "previous"), ("quit", "quit"))


class Layout(FlatContainer):
    def __init__(
        self,
        widgets,
        axis: str = "vertical",
        title: str = "",
        description: str = "",
        keymap: Optional[KeyMap] = None,
        sink: Optional[DiagnosticSink] = None,
    ):
        if axis not in LAYOUT_AXES:
            raise InvalidDescriptor(f"layout must be one of {', '.join(LAYOUT_AXES)}, got {axis!r}")
        super().__init__(widgets, title, description, keymap, sink)
        self.axis = axis
        self.last_width: Optional[int] = None

    @classmethod
    def from_descriptor(
        cls,
        descriptor: Union[ContainerDescriptor, dict[str, Any]],
        keymap: Optional[KeyMap] = None,
        sink: Optional[DiagnosticSink] = None,
    ) -> "Layout":
        if not isinstance(descriptor, ContainerDescriptor):
            descriptor = ContainerDescriptor.from_dict(descriptor)
        if descriptor.layout not in LAYOUT_AXES:
            raise InvalidDescriptor(f"layout must be one of {', '.join(LAYOUT_AXES)}, got {descriptor.layout!r}")
        widgets = build_all(descriptor.widgets, sink)
        return cls(widgets, descriptor.layout, descriptor.title, descriptor.description, keymap, sink)

    def on_resize(self, event: ResizeEvent) -> None:
        self.last_width = event.width

    def current_axis(self) -> str:
        if self.last_width is None:
            return self.axis
        return effective_axis(self.axis, self.last_width)

    def values(self) -> dict[str, Any]:
        return self.serialize()

    def render(self):
        parts = self.header()
        panels = self.panels()
        if self.current_axis() == "horizontal":
            parts.append(Columns(panels, expand=True, equal=True))
        else:
            parts.extend(panels)
        parts.append(navigation_hint(self.keymap, NAV_ACTIONS))
        return Group(*parts)
