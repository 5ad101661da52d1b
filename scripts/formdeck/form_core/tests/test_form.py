from __future__ import annotations

import json
import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from form_core.containers.form import Form  # noqa: E402
from form_core.diagnostics import CollectingSink  # noqa: E402
from form_core.errors import BatchConstructionError, InvalidDescriptor, SerializationError  # noqa: E402
from form_core.events import Command, KeyEvent, ResizeEvent, keys  # noqa: E402
from form_core.formatting import render_plain  # noqa: E402
from form_core.profiles import resolve_keymap  # noqa: E402

SIGNUP = {
    "title": "Sign up",
    "description": "All about you",
    "widgets": [
        {"kind": "text", "name": "nickname", "label": "Nickname"},
        {"kind": "text", "name": "email", "label": "Email", "required": True},
        {"kind": "boolean", "name": "newsletter", "label": "Newsletter"},
    ],
}


def dispatch_all(form, names: str):
    return [form.dispatch(event) for event in keys(names)]


class FormSubmitTests(unittest.TestCase):
    def test_submit_blocked_until_required_field_filled(self):
        form = Form.from_descriptor(SIGNUP)
        self.assertEqual(form.dispatch(KeyEvent("enter")), Command.REPAINT)
        self.assertFalse(form.submitted)
        self.assertEqual(form.widget("email").error, "This field is required")
        self.assertFalse(form.can_submit())

        form.widget("email").set_value("ada@example.com")
        self.assertTrue(form.can_submit())
        self.assertEqual(form.dispatch(KeyEvent("enter")), Command.QUIT)
        self.assertTrue(form.submitted)

    def test_typing_goes_to_focused_widget(self):
        form = Form.from_descriptor(SIGNUP)
        dispatch_all(form, "a,d,a,tab,x,@,y")
        self.assertEqual(form.serialize(), {"nickname": "ada", "email": "x@y", "newsletter": False})

    def test_focus_moves_with_tab_keys(self):
        form = Form.from_descriptor(SIGNUP)
        self.assertEqual(form.focused_widget().name, "nickname")
        form.dispatch(KeyEvent("tab"))
        self.assertEqual(form.focused_widget().name, "email")
        form.dispatch(KeyEvent("shift+tab"))
        form.dispatch(KeyEvent("shift+tab"))
        self.assertEqual(form.focused_widget().name, "newsletter")
        form.dispatch(KeyEvent("space"))
        self.assertTrue(form.widget("newsletter").value())

    def test_all_widgets_evaluated(self):
        form = Form.from_descriptor(
            {
                "widgets": [
                    {"kind": "text", "name": "a", "required": True},
                    {"kind": "text", "name": "b", "required": True},
                ]
            }
        )
        self.assertFalse(form.can_submit())
        self.assertTrue(form.widget("a").error)
        self.assertTrue(form.widget("b").error)

    def test_quit_keys(self):
        form = Form.from_descriptor(SIGNUP)
        self.assertEqual(form.dispatch(KeyEvent("esc")), Command.QUIT)
        self.assertTrue(form.quitting)
        self.assertFalse(form.submitted)
        self.assertEqual(render_plain(form.render()).strip(), "")

    def test_custom_keymap_submit(self):
        keymap = resolve_keymap("vim")
        form = Form.from_descriptor(SIGNUP, keymap=keymap)
        form.dispatch(KeyEvent("alt+j"))
        self.assertEqual(form.focused_widget().name, "email")

    def test_malformed_widget_entry_reports_position(self):
        with self.assertRaises(BatchConstructionError) as ctx:
            Form.from_descriptor(
                {"widgets": [{"kind": "text", "name": "a"}, {"kind": "text", "name": "b", "options": [1]}]}
            )
        self.assertEqual(ctx.exception.index, 1)
        self.assertEqual(ctx.exception.name, "b")
        self.assertIsInstance(ctx.exception.cause, InvalidDescriptor)

    def test_non_mapping_widget_entry_reports_position(self):
        with self.assertRaises(BatchConstructionError) as ctx:
            Form.from_descriptor({"widgets": [{"kind": "text", "name": "a"}, "oops"]})
        self.assertEqual(ctx.exception.index, 1)
        self.assertEqual(ctx.exception.name, "")

    def test_empty_form_rejected(self):
        with self.assertRaises(InvalidDescriptor):
            Form.from_descriptor({"title": "nothing", "widgets": []})


class FormValuesTests(unittest.TestCase):
    def test_serialize_includes_labels(self):
        form = Form.from_descriptor(
            {
                "widgets": [
                    {"kind": "static-label", "name": "intro", "label": "Hello"},
                    {"kind": "numeric-range", "name": "level", "default": 3},
                ]
            }
        )
        self.assertEqual(list(form.serialize()), ["intro", "level"])
        self.assertEqual(json.loads(form.to_json()), {"intro": "Hello", "level": 3.0})

    def test_unserializable_value_names_widget(self):
        form = Form.from_descriptor(SIGNUP)
        form.widget("nickname").value = lambda: object()
        with self.assertRaises(SerializationError) as ctx:
            form.serialize()
        self.assertEqual(ctx.exception.name, "nickname")

    def test_validation_snapshot(self):
        sink = CollectingSink()
        form = Form.from_descriptor(SIGNUP, sink=sink)
        snapshot = form.validation()
        self.assertEqual((snapshot.total, snapshot.valid, snapshot.invalid), (3, 2, 1))
        self.assertEqual(snapshot.errors, {"email": "This field is required"})
        self.assertFalse(snapshot.is_valid)
        self.assertIn("VALIDATION_FAILED", sink.codes())

    def test_repeated_checks_report_each_failure_once(self):
        sink = CollectingSink()
        form = Form.from_descriptor(SIGNUP, sink=sink)
        form.dispatch(KeyEvent("enter"))
        form.dispatch(KeyEvent("enter"))
        form.validation()
        self.assertEqual(sink.codes(), ["VALIDATION_FAILED"])
        self.assertEqual(sink.items[0].field, "email")

        form.widget("email").set_value("x@y")
        form.widget("email").set_value("")
        form.can_submit()
        self.assertEqual(sink.codes(), ["VALIDATION_FAILED", "VALIDATION_FAILED"])

    def test_resize_reaches_unfocused_widgets(self):
        form = Form.from_descriptor(
            {"widgets": [{"kind": "text", "name": "a"}, {"kind": "multiline-text", "name": "notes"}]}
        )
        self.assertEqual(form.dispatch(ResizeEvent(120, 40)), Command.REPAINT)
        self.assertEqual(form.widget("notes").width, 110)

    def test_reset(self):
        form = Form.from_descriptor(SIGNUP)
        dispatch_all(form, "a,tab,b,tab")
        form.reset()
        self.assertEqual(form.serialize(), {"nickname": "", "email": "", "newsletter": False})
        self.assertEqual(form.focused_widget().name, "nickname")
        self.assertFalse(form.submitted)

    def test_render_lists_widgets(self):
        form = Form.from_descriptor(SIGNUP)
        text = render_plain(form.render(), width=60)
        self.assertIn("Sign up", text)
        self.assertIn("Email", text)
        self.assertIn("Submit", text)


if __name__ == "__main__":
    unittest.main()
