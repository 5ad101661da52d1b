"""Key-binding profile resolution and user config merging."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from form_core.errors import ConfigError

ACTIONS = ["quit", "focus_next", "focus_prev", "submit", "group_next", "group_prev"]

JUMP_KEYS = {f"{mod}+{n}": n for mod in ("ctrl", "alt") for n in range(1, 10)}

BUILTIN_PROFILES: dict[str, dict[str, list[str]]] = {
    "default": {
        "quit": ["ctrl+c", "esc"],
        "focus_next": ["tab"],
        "focus_prev": ["shift+tab"],
        "submit": ["enter"],
        "group_next": ["ctrl+tab", "ctrl+n", "pgdown"],
        "group_prev": ["ctrl+shift+tab", "ctrl+p", "pgup"],
    },
    "vim": {
        "quit": ["ctrl+c", "esc"],
        "focus_next": ["tab", "alt+j"],
        "focus_prev": ["shift+tab", "alt+k"],
        "submit": ["enter"],
        "group_next": ["ctrl+tab", "alt+l"],
        "group_prev": ["ctrl+shift+tab", "alt+h"],
    },
}


@dataclass(frozen=True)
class KeyMap:
    name: str = "default"
    bindings: dict[str, frozenset[str]] = field(default_factory=dict)
    jumps: dict[str, int] = field(default_factory=lambda: dict(JUMP_KEYS))

    def matches(self, action: str, key_name: str) -> bool:
        return key_name in self.bindings.get(action, frozenset())

    def action_for(self, key_name: str) -> str | None:
        for action in ACTIONS:
            if self.matches(action, key_name):
                return action
        return None

    def jump_target(self, key_name: str) -> int | None:
        """1-based group number bound to ``key_name``."""
        return self.jumps.get(key_name)


def _build(name: str, bindings: dict[str, list[str]]) -> KeyMap:
    return KeyMap(name=name, bindings={action: frozenset(keys) for action, keys in bindings.items()})


def default_keymap() -> KeyMap:
    return _build("default", BUILTIN_PROFILES["default"])


def load_user_config(path: str | None) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"config path not found: {config_path}")

    try:
        data = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON config: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("config root must be a JSON object")
    return data


def resolve_keymap(profile: str = "default", config_path: str | None = None) -> KeyMap:
    if profile not in BUILTIN_PROFILES:
        raise ConfigError(f"unknown profile: {profile}")

    user_config = load_user_config(config_path)

    selected_profile = user_config.get("profile")
    if selected_profile:
        if selected_profile not in BUILTIN_PROFILES:
            raise ConfigError(f"unknown profile in config: {selected_profile}")
        profile = selected_profile

    resolved = {action: list(keys) for action, keys in BUILTIN_PROFILES[profile].items()}

    overrides = user_config.get("keys")
    if isinstance(overrides, dict):
        for action, keys in overrides.items():
            if action not in ACTIONS:
                raise ConfigError(f"unknown key action in config: {action}")
            if isinstance(keys, str):
                keys = [keys]
            if not isinstance(keys, list) or not all(isinstance(k, str) and k for k in keys):
                raise ConfigError(f"keys for {action} must be a list of key names")
            resolved[action] = keys
    elif overrides is not None:
        raise ConfigError("'keys' must be a mapping of action to key names")

    return _build(profile, resolved)
