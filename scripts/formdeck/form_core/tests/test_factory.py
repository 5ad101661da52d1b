from __future__ import annotations

import unittest
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from form_core.errors import (  # noqa: E402
    BatchConstructionError,
    ConstructionError,
    InvalidDescriptor,
    UnsupportedKind,
)
from form_core.factory import WIDGET_BUILDERS, build, build_all  # noqa: E402
from form_core.models import KINDS, WidgetDescriptor  # noqa: E402
from form_core.widgets.checkbox import Checkbox  # noqa: E402
from form_core.widgets.slider import Slider  # noqa: E402
from form_core.widgets.text import TextInput  # noqa: E402


class BuildTests(unittest.TestCase):
    def test_every_kind_has_a_builder(self):
        self.assertEqual(set(WIDGET_BUILDERS), set(KINDS))

    def test_build_from_mapping(self):
        widget = build({"kind": "text", "name": "title", "label": "Title"})
        self.assertIsInstance(widget, TextInput)
        self.assertEqual(widget.name, "title")

    def test_short_kind_names_are_accepted(self):
        self.assertIsInstance(build({"kind": "checkbox", "name": "ok"}), Checkbox)
        self.assertIsInstance(build({"type": "slider", "name": "level"}), Slider)

    def test_build_from_descriptor(self):
        widget = build(WidgetDescriptor(kind="boolean", name="flag"))
        self.assertIsInstance(widget, Checkbox)

    def test_widget_keeps_its_descriptor(self):
        descriptor = WidgetDescriptor(kind="numeric-range", name="level", help="Volume", options={"max": 5})
        widget = build(descriptor)
        self.assertIs(widget.descriptor, descriptor)
        self.assertEqual(widget.help, "Volume")

    def test_missing_name(self):
        with self.assertRaises(InvalidDescriptor):
            build({"kind": "text"})

    def test_unknown_kind(self):
        with self.assertRaises(UnsupportedKind) as ctx:
            build({"kind": "spinner", "name": "s"})
        self.assertEqual(ctx.exception.kind, "spinner")

    def test_label_falls_back_to_name(self):
        widget = build({"kind": "text", "name": "user_id"})
        self.assertEqual(widget.label, "User ID")

    def test_non_mapping_descriptor(self):
        with self.assertRaises(InvalidDescriptor):
            build(["text", "title"])


class BuildAllTests(unittest.TestCase):
    def test_builds_in_order(self):
        items = build_all(
            [
                {"kind": "text", "name": "a"},
                {"kind": "boolean", "name": "b"},
                {"kind": "static-label", "name": "c", "label": "C"},
            ]
        )
        self.assertEqual([w.name for w in items], ["a", "b", "c"])

    def test_first_failure_reports_position(self):
        with self.assertRaises(BatchConstructionError) as ctx:
            build_all(
                [
                    {"kind": "text", "name": "a"},
                    {"kind": "numeric-range", "name": "bad", "options": {"min": 3, "max": 1}},
                    {"kind": "spinner", "name": "later"},
                ]
            )
        err = ctx.exception
        self.assertEqual(err.index, 1)
        self.assertEqual(err.name, "bad")
        self.assertIsInstance(err.cause, InvalidDescriptor)
        self.assertIsInstance(err, ConstructionError)

    def test_duplicate_names_rejected(self):
        with self.assertRaises(BatchConstructionError) as ctx:
            build_all([{"kind": "text", "name": "a"}, {"kind": "boolean", "name": "a"}])
        self.assertEqual(ctx.exception.index, 1)
        self.assertIsInstance(ctx.exception.cause, InvalidDescriptor)

    def test_unsupported_kind_wrapped(self):
        with self.assertRaises(BatchConstructionError) as ctx:
            build_all([{"kind": "spinner", "name": "s"}])
        self.assertIsInstance(ctx.exception.cause, UnsupportedKind)


if __name__ == "__main__":
    unittest.main()
