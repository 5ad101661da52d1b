"""Input events, dispatch commands and raw terminal key decoding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Command(str, Enum):
    NONE = "none"
    REPAINT = "repaint"
    QUIT = "quit"


@dataclass(frozen=True)
class KeyEvent:
    key: str

    @property
    def printable(self) -> str | None:
        """The character this key inserts into a text buffer, if any."""
        if self.key == "space":
            return " "
        if len(self.key) == 1 and self.key.isprintable():
            return self.key
        return None


@dataclass(frozen=True)
class ResizeEvent:
    width: int
    height: int


Event = KeyEvent | ResizeEvent


def key(name: str) -> KeyEvent:
    return KeyEvent(name)


def keys(names: str) -> list[KeyEvent]:
    """Comma separated key names, e.g. ``"tab,a,b,enter"``; ``","`` itself is ``comma``."""
    out = []
    for raw in names.split(","):
        name = raw.strip()
        if not name:
            continue
        out.append(KeyEvent("," if name == "comma" else name))
    return out


ESCAPE_SEQUENCES = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[3~": "delete",
    "\x1b[5~": "pgup",
    "\x1b[6~": "pgdown",
    "\x1b[Z": "shift+tab",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
}

CONTROL_KEYS = {
    "\t": "tab",
    "\r": "enter",
    "\n": "enter",
    " ": "space",
    "\x7f": "backspace",
    "\x08": "backspace",
    "\x03": "ctrl+c",
}


def parse_keys(data: str) -> list[str]:
    """Decode a chunk of raw terminal input into key names.

    A lone ESC is ``esc``; ESC followed by a printable character that does not
    start a known sequence is ``alt+<char>``.
    """
    names: list[str] = []
    i = 0
    while i < len(data):
        ch = data[i]
        if ch == "\x1b":
            for seq, name in ESCAPE_SEQUENCES.items():
                if data.startswith(seq, i):
                    names.append(name)
                    i += len(seq)
                    break
            else:
                nxt = data[i + 1] if i + 1 < len(data) else ""
                if nxt and nxt not in "[O" and nxt.isprintable():
                    names.append(f"alt+{nxt}")
                    i += 2
                else:
                    names.append("esc")
                    i += 1
            continue
        if ch in CONTROL_KEYS:
            names.append(CONTROL_KEYS[ch])
        elif "\x01" <= ch <= "\x1a":
            names.append(f"ctrl+{chr(ord(ch) + 96)}")
        elif ch.isprintable():
            names.append(ch)
        i += 1
    return names
