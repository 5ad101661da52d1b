from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from form_core.errors import ConfigError  # noqa: E402
from form_core.profiles import ACTIONS, default_keymap, resolve_keymap  # noqa: E402


class ProfileTests(unittest.TestCase):
    def test_default_profile(self):
        keymap = resolve_keymap("default")
        self.assertEqual(keymap.name, "default")
        self.assertEqual(set(keymap.bindings), set(ACTIONS))
        self.assertTrue(keymap.matches("focus_next", "tab"))
        self.assertTrue(keymap.matches("quit", "esc"))
        self.assertEqual(keymap.action_for("enter"), "submit")
        self.assertIsNone(keymap.action_for("a"))

    def test_vim_profile(self):
        keymap = resolve_keymap("vim")
        self.assertTrue(keymap.matches("focus_next", "alt+j"))
        self.assertTrue(keymap.matches("group_prev", "alt+h"))
        self.assertFalse(keymap.matches("focus_next", "j"))

    def test_jump_targets(self):
        keymap = default_keymap()
        self.assertEqual(keymap.jump_target("ctrl+1"), 1)
        self.assertEqual(keymap.jump_target("alt+9"), 9)
        self.assertIsNone(keymap.jump_target("ctrl+0"))

    def test_unknown_profile(self):
        with self.assertRaises(ConfigError):
            resolve_keymap("emacs")

    def test_config_selects_profile_and_overrides(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg_path = Path(tmp) / "cfg.json"
            cfg_path.write_text(json.dumps({"profile": "vim", "keys": {"submit": "ctrl+s", "quit": ["q"]}}))
            keymap = resolve_keymap("default", str(cfg_path))
            self.assertEqual(keymap.name, "vim")
            self.assertTrue(keymap.matches("submit", "ctrl+s"))
            self.assertFalse(keymap.matches("submit", "enter"))
            self.assertEqual(keymap.bindings["quit"], frozenset({"q"}))
            self.assertTrue(keymap.matches("focus_next", "alt+j"))

    def test_unknown_action_in_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg_path = Path(tmp) / "cfg.json"
            cfg_path.write_text(json.dumps({"keys": {"teleport": ["t"]}}))
            with self.assertRaises(ConfigError):
                resolve_keymap("default", str(cfg_path))

    def test_bad_config_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp) / "missing.json"
            with self.assertRaises(ConfigError):
                resolve_keymap("default", str(missing))

            broken = Path(tmp) / "broken.json"
            broken.write_text("{not json")
            with self.assertRaises(ConfigError):
                resolve_keymap("default", str(broken))

            listed = Path(tmp) / "list.json"
            listed.write_text("[]")
            with self.assertRaises(ConfigError):
                resolve_keymap("default", str(listed))

    def test_config_error_is_value_error(self):
        with self.assertRaises(ValueError):
            resolve_keymap("nope")


if __name__ == "__main__":
    unittest.main()
