from __future__ import annotations

import json
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from form_core.containers.tabs import TabGroup, TabSet  # noqa: E402
from form_core.diagnostics import CollectingSink  # noqa: E402
from form_core.errors import InvalidDescriptor  # noqa: E402
from form_core.events import Command, KeyEvent, ResizeEvent  # noqa: E402
from form_core.formatting import render_plain  # noqa: E402


def shared_user(required: bool = False) -> dict:
    return {
        "title": "Accounts",
        "groups": [
            {"name": "g1", "label": "First", "widgets": [{"kind": "text", "name": "user", "required": required}]},
            {"name": "g2", "label": "Second", "widgets": [{"kind": "text", "name": "user"}]},
        ],
    }


SETTINGS = {
    "groups": [
        {
            "name": "general",
            "label": "General",
            "widgets": [
                {"kind": "text", "name": "nick"},
                {"kind": "multiline-text", "name": "bio"},
            ],
        },
        {"name": "editor", "label": "Editor", "widgets": [{"kind": "multiline-text", "name": "notes"}]},
        {"name": "about", "label": "About", "widgets": [{"kind": "static-label", "name": "v", "label": "v1"}]},
    ]
}


def user(tabs: TabSet, group: str):
    return tabs.group(group).widgets[0]


class ConflictTests(unittest.TestCase):
    def test_differing_shared_name_is_one_conflict(self):
        tabs = TabSet.from_descriptor(shared_user())
        user(tabs, "g1").set_value("x")
        user(tabs, "g2").set_value("y")
        conflicts = tabs.validation().conflicts()
        self.assertEqual(len(conflicts), 1)
        self.assertEqual(conflicts[0].field, "user")
        self.assertEqual(conflicts[0].severity, "warning")
        self.assertEqual(conflicts[0].context["groups"], ["g1", "g2"])
        self.assertEqual(conflicts[0].context["values"], ["x", "y"])

    def test_equal_values_do_not_conflict(self):
        tabs = TabSet.from_descriptor(shared_user())
        user(tabs, "g1").set_value("same")
        user(tabs, "g2").set_value("same")
        self.assertEqual(tabs.conflicts(), [])

    def test_conflicts_do_not_affect_validity(self):
        tabs = TabSet.from_descriptor(shared_user())
        user(tabs, "g1").set_value("x")
        self.assertTrue(tabs.is_valid())
        self.assertTrue(tabs.validation().is_valid)

    def test_sink_receives_conflicts(self):
        sink = CollectingSink()
        tabs = TabSet.from_descriptor(shared_user(), sink=sink)
        user(tabs, "g2").set_value("y")
        tabs.validation()
        self.assertEqual(sink.codes(), ["CROSS_GROUP_CONFLICT"])


class TabValidationTests(unittest.TestCase):
    def test_errors_keyed_by_group(self):
        tabs = TabSet.from_descriptor(shared_user(required=True))
        snapshot = tabs.validation()
        self.assertFalse(tabs.is_valid())
        self.assertEqual(snapshot.errors, {"g1.user": "This field is required"})
        codes = [d.code for d in snapshot.diagnostics]
        self.assertIn("GROUP_VALIDATION_FAILED", codes)
        group_failure = [d for d in snapshot.diagnostics if d.code == "GROUP_VALIDATION_FAILED"]
        self.assertEqual([d.field for d in group_failure], ["g1"])

    def test_error_marker_in_header(self):
        tabs = TabSet.from_descriptor(shared_user(required=True))
        tabs.is_valid()
        text = render_plain(tabs.render(), width=80)
        self.assertIn("First ⚠", text)
        self.assertIn("Second", text)

    def test_value_and_json(self):
        tabs = TabSet.from_descriptor(shared_user())
        user(tabs, "g1").set_value("ada")
        self.assertEqual(tabs.value(), {"g1": {"user": "ada"}, "g2": {"user": ""}})
        self.assertEqual(json.loads(tabs.to_json()), tabs.value())


class TabDispatchTests(unittest.TestCase):
    def test_group_keys_inert_without_focus(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        self.assertEqual(tabs.dispatch(KeyEvent("ctrl+n")), Command.NONE)
        self.assertEqual(tabs.active, 0)

    def test_group_switch_moves_widget_focus(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        tabs.set_focus(True)
        nick = tabs.group("general").widgets[0]
        notes = tabs.group("editor").widgets[0]
        self.assertTrue(nick.focused)
        self.assertEqual(tabs.dispatch(KeyEvent("ctrl+n")), Command.REPAINT)
        self.assertEqual(tabs.active, 1)
        self.assertFalse(nick.focused)
        self.assertTrue(notes.focused)
        tabs.dispatch(KeyEvent("ctrl+p"))
        tabs.dispatch(KeyEvent("ctrl+p"))
        self.assertEqual(tabs.active, 2)
        self.assertIsNone(tabs.focused_widget())

    def test_jump_keys(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        tabs.set_focus(True)
        tabs.dispatch(KeyEvent("alt+3"))
        self.assertEqual(tabs.active, 2)
        tabs.dispatch(KeyEvent("ctrl+9"))
        self.assertEqual(tabs.active, 2)
        self.assertFalse(tabs.jump(0))
        self.assertTrue(tabs.jump(1))
        self.assertEqual(tabs.active, 0)

    def test_active_index_is_clamped(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        tabs.active = 10
        self.assertEqual(tabs.active, 2)
        tabs.active = -4
        self.assertEqual(tabs.active, 0)

    def test_keys_reach_focused_widget_in_group(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        tabs.set_focus(True)
        for name in ("h", "i", "tab", "y", "o"):
            tabs.dispatch(KeyEvent(name))
        self.assertEqual(tabs.value()["general"], {"nick": "hi", "bio": "yo"})

    def test_values_survive_group_switch(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        tabs.set_focus(True)
        tabs.dispatch(KeyEvent("a"))
        tabs.dispatch(KeyEvent("pgdown"))
        tabs.dispatch(KeyEvent("pgup"))
        self.assertEqual(tabs.value()["general"]["nick"], "a")

    def test_resize_only_reaches_active_group(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        bio = tabs.group("general").widgets[1]
        notes = tabs.group("editor").widgets[0]
        before = notes.width
        tabs.dispatch(ResizeEvent(200, 50))
        self.assertEqual(bio.width, 190)
        self.assertEqual(notes.width, before)

    def test_quit_when_focused(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        tabs.set_focus(True)
        self.assertEqual(tabs.dispatch(KeyEvent("esc")), Command.QUIT)
        self.assertTrue(tabs.quitting)

    def test_reset(self):
        tabs = TabSet.from_descriptor(SETTINGS)
        tabs.set_focus(True)
        tabs.dispatch(KeyEvent("z"))
        tabs.dispatch(KeyEvent("ctrl+n"))
        tabs.reset()
        self.assertEqual(tabs.active, 0)
        self.assertFalse(tabs.focused)
        self.assertEqual(tabs.value()["general"]["nick"], "")
        self.assertFalse(any(w.focused for g in tabs.groups for w in g.widgets))


class TabConstructionTests(unittest.TestCase):
    def test_needs_groups(self):
        with self.assertRaises(InvalidDescriptor):
            TabSet.from_descriptor({"groups": []})

    def test_group_needs_name_and_label(self):
        with self.assertRaises(InvalidDescriptor):
            TabGroup("", "Label", [])
        with self.assertRaises(InvalidDescriptor):
            TabSet.from_descriptor({"groups": [{"name": "g", "widgets": []}]})

    def test_duplicate_group_names(self):
        with self.assertRaises(InvalidDescriptor):
            TabSet([TabGroup("g", "G", []), TabGroup("g", "Again", [])])


if __name__ == "__main__":
    unittest.main()
