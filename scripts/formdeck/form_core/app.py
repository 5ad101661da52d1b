"""Command-line entrypoint: render a descriptor, replay keys, or run it live."""

from __future__ import annotations

import argparse
import codecs
import json
import logging
import os
import select
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.live import Live

from form_core.containers.form import Form
from form_core.containers.layout import Layout
from form_core.containers.tabs import TabSet
from form_core.diagnostics import LoggingSink, configure_logging
from form_core.errors import FormdeckError, InvalidDescriptor, TerminalUnavailable
from form_core.events import Command, KeyEvent, ResizeEvent, keys, parse_keys
from form_core.profiles import BUILTIN_PROFILES, KeyMap, resolve_keymap

logger = logging.getLogger(__name__)

MODES = ("form", "layout", "tabs")
POLL_SECONDS = 0.1


def load_descriptor(path: str) -> dict[str, Any]:
    descriptor_path = Path(path)
    if not descriptor_path.exists():
        raise InvalidDescriptor(f"descriptor not found: {descriptor_path}")
    try:
        data = json.loads(descriptor_path.read_text())
    except json.JSONDecodeError as exc:
        raise InvalidDescriptor(f"invalid JSON descriptor: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidDescriptor("descriptor root must be a JSON object")
    return data


def detect_mode(data: dict[str, Any]) -> str:
    if "groups" in data or "tabs" in data:
        return "tabs"
    if "layout" in data:
        return "layout"
    return "form"


def build_container(data: dict[str, Any], mode: str, keymap: KeyMap, sink=None):
    if mode == "tabs":
        tabs = TabSet.from_descriptor(data, keymap, sink)
        tabs.set_focus(True)
        return tabs
    if mode == "layout":
        return Layout.from_descriptor(data, keymap, sink)
    return Form.from_descriptor(data, keymap, sink)


def values_of(container) -> dict[str, Any]:
    if isinstance(container, TabSet):
        return container.value()
    return container.serialize()


def replay(container, events) -> list[Command]:
    """Feed scripted events; stops at the first QUIT."""
    commands = []
    for event in events:
        command = container.dispatch(event)
        commands.append(command)
        if command == Command.QUIT:
            break
    return commands


def _json_output(mode: str, container) -> str:
    payload = {
        "mode": mode,
        "submitted": bool(getattr(container, "submitted", False)),
        "values": values_of(container),
        "validation": container.validation().to_dict(),
    }
    return json.dumps(payload, indent=2)


def _poll_keys(fd: int, decoder: codecs.IncrementalDecoder, timeout: float) -> list[str]:
    r, _, _ = select.select([fd], [], [], timeout)
    if not r:
        return []
    try:
        chunk = os.read(fd, 64)
    except OSError:
        return []
    # A multi-byte character split across reads is held until its tail arrives.
    return parse_keys(decoder.decode(chunk))


def run_live(container, console: Console) -> None:
    """Interactive loop; returns once the container quits or submits.

    The terminal goes to non-canonical mode (ICANON/ECHO off, VMIN=0/VTIME=0)
    rather than raw mode so the alternate screen keeps rendering over SSH.
    """
    try:
        import termios
    except ImportError as exc:
        raise TerminalUnavailable("interactive mode needs a POSIX terminal") from exc

    try:
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
    except (OSError, ValueError, termios.error) as exc:
        raise TerminalUnavailable("interactive mode needs a terminal on stdin") from exc
    decoder = codecs.getincrementaldecoder("utf-8")(errors="ignore")
    new = termios.tcgetattr(fd)
    new[3] &= ~(termios.ICANON | termios.ECHO)
    new[6][termios.VMIN] = 0
    new[6][termios.VTIME] = 0

    size = console.size
    container.dispatch(ResizeEvent(size.width, size.height))
    try:
        termios.tcsetattr(fd, termios.TCSADRAIN, new)
        with Live(container.render(), console=console, auto_refresh=False, screen=True) as live:
            while True:
                current = console.size
                if current != size:
                    size = current
                    container.dispatch(ResizeEvent(size.width, size.height))
                command = Command.NONE
                for name in _poll_keys(fd, decoder, POLL_SECONDS):
                    command = container.dispatch(KeyEvent(name))
                    if command == Command.QUIT:
                        break
                if command == Command.QUIT:
                    return
                live.update(container.render(), refresh=True)
    except KeyboardInterrupt:
        container.quitting = True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Render and drive a terminal form from a JSON descriptor")
    parser.add_argument("descriptor", help="Path to a JSON form, layout or tab set descriptor")
    parser.add_argument("--mode", choices=MODES, help="Container type (default: detected from the descriptor)")
    parser.add_argument("--keys", help="Comma separated key names to replay before output, e.g. tab,a,enter")
    parser.add_argument("-l", "--live", action="store_true", help="Run the interactive loop")
    parser.add_argument("--json", action="store_true", help="Emit values and validation as JSON")
    parser.add_argument(
        "--profile",
        default=os.environ.get("FORMDECK_PROFILE", "default"),
        help=f"Key profile: {'|'.join(BUILTIN_PROFILES)}",
    )
    parser.add_argument("--config", help="Optional JSON config file for key binding overrides")
    parser.add_argument("--width", type=int, help="Render width override")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level)
    except ValueError as exc:
        print(f"formdeck: {exc}", file=sys.stderr)
        return 2

    try:
        keymap = resolve_keymap(args.profile, args.config)
        data = load_descriptor(args.descriptor)
        mode = args.mode or detect_mode(data)
        container = build_container(data, mode, keymap, LoggingSink())
        logger.debug("loaded %s descriptor from %s", mode, args.descriptor)
    except FormdeckError as exc:
        print(f"formdeck: {exc}", file=sys.stderr)
        return 2

    console = Console(width=args.width) if args.width else Console()
    if args.width:
        container.dispatch(ResizeEvent(args.width, console.size.height))

    if args.keys:
        replay(container, keys(args.keys))

    if args.json:
        print(_json_output(mode, container))
        return 0

    if args.live:
        try:
            run_live(container, console)
        except TerminalUnavailable as exc:
            print(f"formdeck: {exc}", file=sys.stderr)
            return 2
        if getattr(container, "submitted", False):
            print(json.dumps(values_of(container), indent=2))
        return 0

    console.print(container.render())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
