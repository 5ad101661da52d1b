"""Widget contract and rendering helpers shared by every widget kind."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from form_core.diagnostics import DiagnosticSink, emit
from form_core.events import Command, Event, KeyEvent, ResizeEvent
from form_core.formatting import label_for_name
from form_core.models import Diagnostic, WidgetDescriptor

logger = logging.getLogger(__name__)

BORDER_FOCUSED = "cyan"
BORDER_IDLE = "grey50"
LABEL_STYLE = "bold"
LABEL_ERROR_STYLE = "bold red"
ERROR_STYLE = "red"
HELP_STYLE = "dim"


def border_for(focused: bool) -> str:
    return BORDER_FOCUSED if focused else BORDER_IDLE


def framed(widget: "Widget", focused: bool) -> Panel:
    return Panel(widget.render(), border_style=border_for(focused), padding=(0, 1))


class Widget(ABC):
    """One control owning its value, error message and focus flag.

    Containers drive widgets exclusively through this interface; they never
    look at the concrete kind.
    """

    kind = ""

    def __init__(self, descriptor: WidgetDescriptor, sink: Optional[DiagnosticSink] = None):
        self.descriptor = descriptor
        self.name = descriptor.name
        self.label = descriptor.label or label_for_name(descriptor.name)
        self.help = descriptor.help
        self.required = descriptor.required
        self.sink = sink
        self._error = ""
        self._focused = False

    # -- focus ---------------------------------------------------------

    def can_focus(self) -> bool:
        return True

    def set_focus(self, focused: bool) -> None:
        self._focused = bool(focused)

    @property
    def focused(self) -> bool:
        return self._focused

    # -- errors --------------------------------------------------------

    @property
    def error(self) -> str:
        return self._error

    def set_error(self, message: str) -> None:
        self._error = message or ""

    def clear_error(self) -> None:
        self._error = ""

    def _fail(self, message: str) -> bool:
        """Record a failed rule; the sink hears about it only when the message changes."""
        if message == self._error:
            return False
        self._error = message
        logger.debug("widget %s invalid: %s", self.name, message)
        emit(
            self.sink,
            Diagnostic(
                code="VALIDATION_FAILED",
                message=message,
                field=self.name,
                context={"kind": self.kind, "value": self.value()},
            ),
        )
        return False

    def _pass(self) -> bool:
        self._error = ""
        return True

    # -- input ---------------------------------------------------------

    def handle_input(self, event: Event) -> Optional[Command]:
        if isinstance(event, ResizeEvent):
            return self.on_resize(event)
        if not self._focused or not isinstance(event, KeyEvent):
            return None
        return self.on_key(event)

    def on_resize(self, event: ResizeEvent) -> Optional[Command]:
        return None

    @abstractmethod
    def on_key(self, event: KeyEvent) -> Optional[Command]:
        """Handle a key while focused; return REPAINT when state changed."""

    # -- value ---------------------------------------------------------

    @abstractmethod
    def is_valid(self) -> bool:
        ...

    @abstractmethod
    def value(self) -> Any:
        ...

    @abstractmethod
    def set_value(self, value: Any) -> None:
        ...

    @abstractmethod
    def reset(self) -> None:
        ...

    # -- rendering -----------------------------------------------------

    @abstractmethod
    def render_body(self):
        ...

    def render_label(self) -> Optional[Text]:
        if not self.label:
            return None
        return Text(self.label, style=LABEL_ERROR_STYLE if self._error else LABEL_STYLE)

    def render_footer(self) -> Optional[Text]:
        if self._error:
            return Text(f"✗ {self._error}", style=ERROR_STYLE)
        if self.help:
            return Text(self.help, style=HELP_STYLE)
        return None

    def render(self) -> Group:
        parts = [self.render_label(), self.render_body(), self.render_footer()]
        return Group(*[part for part in parts if part is not None])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
