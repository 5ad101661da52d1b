"""Focus cursor over an ordered widget sequence."""

from __future__ import annotations

from typing import Optional, Sequence

from form_core.widgets import Widget

NO_FOCUS = -1


def first_focusable(widgets: Sequence[Widget]) -> int:
    for i, widget in enumerate(widgets):
        if widget.can_focus():
            return i
    return NO_FOCUS


class FocusCursor:
    """Index of the widget receiving keys, or ``NO_FOCUS``.

    Traversal wraps around and skips widgets that cannot take focus. With no
    focusable widget every operation is a no-op.
    """

    def __init__(self, widgets: Sequence[Widget]):
        self.widgets = widgets
        self.index = first_focusable(widgets)

    def current(self) -> Optional[Widget]:
        if self.index == NO_FOCUS:
            return None
        return self.widgets[self.index]

    def engage(self) -> None:
        widget = self.current()
        if widget is not None:
            widget.set_focus(True)

    def release(self) -> None:
        widget = self.current()
        if widget is not None:
            widget.set_focus(False)

    def focus_next(self) -> None:
        self._step(1)

    def focus_prev(self) -> None:
        self._step(-1)

    def _step(self, direction: int) -> None:
        if self.index == NO_FOCUS:
            return
        count = len(self.widgets)
        self.release()
        for offset in range(1, count + 1):
            candidate = (self.index + direction * offset) % count
            if self.widgets[candidate].can_focus():
                self.index = candidate
                break
        self.engage()

    def reset(self) -> None:
        self.index = first_focusable(self.widgets)

    def __repr__(self) -> str:
        return f"FocusCursor(index={self.index}, size={len(self.widgets)})"
