"""Descriptor to widget construction."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

from form_core.diagnostics import DiagnosticSink
from form_core.errors import BatchConstructionError, ConstructionError, InvalidDescriptor, UnsupportedKind
from form_core.models import (
    KIND_BOOLEAN,
    KIND_CHOICE,
    KIND_LABEL,
    KIND_MULTILINE,
    KIND_PATH,
    KIND_RANGE,
    KIND_TEXT,
    WidgetDescriptor,
)
from form_core.widgets import Widget
from form_core.widgets.checkbox import Checkbox
from form_core.widgets.filepicker import PathPicker
from form_core.widgets.label import StaticLabel
from form_core.widgets.radio import RadioGroup
from form_core.widgets.slider import Slider
from form_core.widgets.text import TextArea, TextInput

logger = logging.getLogger(__name__)

WIDGET_BUILDERS = {
    KIND_TEXT: TextInput,
    KIND_MULTILINE: TextArea,
    KIND_BOOLEAN: Checkbox,
    KIND_CHOICE: RadioGroup,
    KIND_RANGE: Slider,
    KIND_PATH: PathPicker,
    KIND_LABEL: StaticLabel,
}


def _as_descriptor(descriptor: Union[WidgetDescriptor, dict[str, Any]]) -> WidgetDescriptor:
    if isinstance(descriptor, WidgetDescriptor):
        return descriptor
    return WidgetDescriptor.from_dict(descriptor)


def _name_of(raw: Any) -> str:
    if isinstance(raw, WidgetDescriptor):
        return raw.name
    if isinstance(raw, dict):
        return str(raw.get("name") or "")
    return ""


def build(
    descriptor: Union[WidgetDescriptor, dict[str, Any]],
    sink: Optional[DiagnosticSink] = None,
) -> Widget:
    descriptor = _as_descriptor(descriptor)
    if not descriptor.name:
        raise InvalidDescriptor(f"{descriptor.kind or 'widget'} descriptor has no name")

    builder = WIDGET_BUILDERS.get(descriptor.kind)
    if builder is None:
        raise UnsupportedKind(descriptor.kind)

    widget = builder(descriptor, sink)
    logger.debug("built %s widget %s", descriptor.kind, descriptor.name)
    return widget


def build_all(
    descriptors: Iterable[Union[WidgetDescriptor, dict[str, Any]]],
    sink: Optional[DiagnosticSink] = None,
) -> list[Widget]:
    """Build every descriptor or none: the first failure aborts the batch."""
    widgets: list[Widget] = []
    seen: set[str] = set()
    for index, raw in enumerate(descriptors):
        name = _name_of(raw)
        try:
            widget = build(raw, sink)
            if widget.name in seen:
                raise InvalidDescriptor(f"duplicate widget name {widget.name!r}")
        except ConstructionError as exc:
            raise BatchConstructionError(index, name, exc) from exc
        seen.add(widget.name)
        widgets.append(widget)
    return widgets
