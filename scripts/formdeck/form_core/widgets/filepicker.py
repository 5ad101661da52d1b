"""Path selector with an inline directory browser."""

from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from rich.table import Table
from rich.text import Text

from form_core.errors import InvalidDescriptor, TypeMismatch
from form_core.events import Command, KeyEvent, ResizeEvent
from form_core.models import KIND_PATH, WidgetDescriptor
from form_core.widgets import HELP_STYLE, Widget

MSG_REQUIRED = "A path must be selected"
MSG_MISSING = "Path does not exist"
MSG_FILTER = "Path does not match filter"
VISIBLE_ROWS = 10


@dataclass(frozen=True)
class Entry:
    name: str
    is_dir: bool


def list_directory(path: Path) -> list[Entry]:
    entries = []
    with os.scandir(path) as it:
        for item in it:
            try:
                is_dir = item.is_dir()
            except OSError:
                is_dir = False
            entries.append(Entry(item.name, is_dir))
    return sorted(entries, key=lambda e: (not e.is_dir, e.name.lower()))


def parse_filter(raw: Any, name: str) -> list[str]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, str):
        patterns = [p.strip() for p in raw.split(",")]
    elif isinstance(raw, list) and all(isinstance(p, str) for p in raw):
        patterns = [p.strip() for p in raw]
    else:
        raise InvalidDescriptor(f"widget {name!r}: filter must be a string or list of strings")
    patterns = [p for p in patterns if p and p != "*"]
    return patterns


class PathPicker(Widget):
    """The directory is only read when browsing keys arrive, never at construction."""

    kind = KIND_PATH

    def __init__(
        self,
        descriptor: WidgetDescriptor,
        sink=None,
        lister: Optional[Callable[[Path], list[Entry]]] = None,
    ):
        super().__init__(descriptor, sink)
        options = descriptor.options
        self.filters = parse_filter(options.get("filter"), self.name)
        self.show_hidden = bool(options.get("show_hidden", False))
        self.must_exist = bool(options.get("must_exist", False))
        start_dir = options.get("start_dir", ".")
        if not isinstance(start_dir, str):
            raise InvalidDescriptor(f"widget {self.name!r}: start_dir must be a string")

        self.selected = descriptor.default if isinstance(descriptor.default, str) else ""
        self.selected_is_dir = self.selected.endswith(("/", os.sep))
        self.initial_value = self.selected
        self.current_dir = Path(start_dir)
        self.entries: list[Entry] = []
        self.cursor = 0
        self.loaded = False
        self.rows = VISIBLE_ROWS
        self._lister = lister or list_directory

    # -- browsing ------------------------------------------------------

    def matches_filter(self, name: str) -> bool:
        if not self.filters:
            return True
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.filters)

    def load(self) -> None:
        self.loaded = True
        try:
            entries = self._lister(self.current_dir)
        except OSError as exc:
            self.entries = []
            self.cursor = 0
            self._error = f"Cannot read directory: {exc.strerror or exc}"
            return
        self.entries = [
            e
            for e in entries
            if (self.show_hidden or not e.name.startswith("."))
            and (e.is_dir or self.matches_filter(e.name))
        ]
        self.cursor = min(self.cursor, max(0, len(self.entries) - 1))

    def highlighted(self) -> Optional[Entry]:
        if 0 <= self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None

    def _enter(self, path: Path) -> None:
        self.current_dir = path
        self.cursor = 0
        self.load()

    def _select(self, entry: Entry) -> None:
        self.selected = str(self.current_dir / entry.name)
        self.selected_is_dir = entry.is_dir
        self._error = ""

    def on_key(self, event: KeyEvent) -> Optional[Command]:
        if not self.loaded:
            self.load()
        name = event.key
        entry = self.highlighted()
        if name in ("up", "k"):
            self.cursor = max(0, self.cursor - 1)
        elif name in ("down", "j"):
            self.cursor = min(max(0, len(self.entries) - 1), self.cursor + 1)
        elif name in ("home", "g"):
            self.cursor = 0
        elif name in ("end", "G"):
            self.cursor = max(0, len(self.entries) - 1)
        elif name in ("left", "h", "backspace"):
            parent = self.current_dir.resolve().parent
            if parent != self.current_dir.resolve():
                self._enter(parent)
        elif name in ("right", "l", "enter"):
            if entry is None:
                return None
            if entry.is_dir:
                self._enter(self.current_dir / entry.name)
            else:
                self._select(entry)
        elif name == "space":
            if entry is None:
                return None
            self._select(entry)
        elif name == ".":
            self.show_hidden = not self.show_hidden
            self.load()
        else:
            return None
        return Command.REPAINT

    def on_resize(self, event: ResizeEvent) -> Optional[Command]:
        self.rows = max(3, min(VISIBLE_ROWS, event.height - 14))
        return Command.REPAINT

    # -- contract ------------------------------------------------------

    def is_valid(self) -> bool:
        if self.required and not self.selected:
            return self._fail(MSG_REQUIRED)
        if not self.selected:
            return self._pass()
        if self.must_exist and not os.path.exists(self.selected):
            return self._fail(MSG_MISSING)
        if not self.selected_is_dir and not self.matches_filter(os.path.basename(self.selected.rstrip("/"))):
            return self._fail(MSG_FILTER)
        return self._pass()

    def value(self) -> str:
        return self.selected

    def set_value(self, value: Any) -> None:
        if not isinstance(value, str):
            raise TypeMismatch(f"{self.name}: expected a path string, got {type(value).__name__}")
        self.selected = value
        self.selected_is_dir = value.endswith(("/", os.sep))
        self._error = ""

    def reset(self) -> None:
        self.selected = self.initial_value
        self.selected_is_dir = self.selected.endswith(("/", os.sep))
        self._error = ""
        self.set_focus(False)

    def render_body(self):
        header = Text(f"📁 {self.selected}" if self.selected else "📂 No path selected")
        if not self._focused:
            return header

        table = Table.grid(expand=True)
        table.add_column()
        table.add_row(header)
        table.add_row(Text(f"{self.current_dir}", style=HELP_STYLE))
        if not self.loaded:
            table.add_row(Text("Press ↓ to browse", style=HELP_STYLE))
            return table
        if not self.entries:
            table.add_row(Text("(empty)", style=HELP_STYLE))
            return table

        start = max(0, min(self.cursor - self.rows // 2, len(self.entries) - self.rows))
        for i, entry in enumerate(self.entries[start : start + self.rows], start=start):
            marker = "›" if i == self.cursor else " "
            suffix = "/" if entry.is_dir else ""
            style = "bold cyan" if i == self.cursor else ("blue" if entry.is_dir else "")
            table.add_row(Text(f"{marker} {entry.name}{suffix}", style=style, no_wrap=True, overflow="ellipsis"))
        return table
