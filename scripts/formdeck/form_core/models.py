"""Shared model contracts: descriptors in, diagnostics and snapshots out."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from form_core.errors import BatchConstructionError, InvalidDescriptor

KIND_TEXT = "text"
KIND_MULTILINE = "multiline-text"
KIND_BOOLEAN = "boolean"
KIND_CHOICE = "single-choice-group"
KIND_RANGE = "numeric-range"
KIND_PATH = "path"
KIND_LABEL = "static-label"

KINDS = (KIND_TEXT, KIND_MULTILINE, KIND_BOOLEAN, KIND_CHOICE, KIND_RANGE, KIND_PATH, KIND_LABEL)

# Short names used by older descriptor files.
KIND_ALIASES = {
    "textinput": KIND_TEXT,
    "textarea": KIND_MULTILINE,
    "checkbox": KIND_BOOLEAN,
    "radiogroup": KIND_CHOICE,
    "slider": KIND_RANGE,
    "filepicker": KIND_PATH,
    "label": KIND_LABEL,
}

LAYOUT_AXES = ("horizontal", "vertical")


def normalize_kind(kind: str) -> str:
    raw = str(kind or "").strip().lower()
    return KIND_ALIASES.get(raw, raw)


def _require_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise InvalidDescriptor(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _widget_list(data: dict, what: str) -> list[WidgetDescriptor]:
    raw = data.get("widgets", data.get("components", []))
    if not isinstance(raw, list):
        raise InvalidDescriptor(f"{what}: 'widgets' must be a list")
    widgets = []
    for index, item in enumerate(raw):
        try:
            widgets.append(WidgetDescriptor.from_dict(item))
        except InvalidDescriptor as exc:
            name = str(item.get("name") or "") if isinstance(item, dict) else ""
            raise BatchConstructionError(index, name, exc) from exc
    return widgets


@dataclass(frozen=True)
class WidgetDescriptor:
    kind: str
    name: str
    label: str = ""
    placeholder: str = ""
    help: str = ""
    required: bool = False
    default: Any = None
    options: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "WidgetDescriptor":
        data = _require_mapping(data, "widget descriptor")
        options = data.get("options") or {}
        if not isinstance(options, dict):
            raise InvalidDescriptor(f"widget {data.get('name', '')!r}: 'options' must be a mapping")
        return cls(
            kind=normalize_kind(data.get("kind", data.get("type", ""))),
            name=str(data.get("name") or ""),
            label=str(data.get("label") or ""),
            placeholder=str(data.get("placeholder") or ""),
            help=str(data.get("help") or ""),
            required=bool(data.get("required", False)),
            default=data.get("default"),
            options=dict(options),
        )


@dataclass(frozen=True)
class ContainerDescriptor:
    """Form or layout: a titled flat widget list."""

    title: str = ""
    description: str = ""
    layout: str = "vertical"
    widgets: list[WidgetDescriptor] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "ContainerDescriptor":
        data = _require_mapping(data, "container descriptor")
        return cls(
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            layout=str(data.get("layout") or "vertical"),
            widgets=_widget_list(data, "container"),
        )


@dataclass(frozen=True)
class GroupDescriptor:
    name: str
    label: str
    widgets: list[WidgetDescriptor] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "GroupDescriptor":
        data = _require_mapping(data, "group descriptor")
        return cls(
            name=str(data.get("name") or ""),
            label=str(data.get("label") or ""),
            widgets=_widget_list(data, f"group {data.get('name', '')!r}"),
        )


@dataclass(frozen=True)
class TabSetDescriptor:
    title: str = ""
    groups: list[GroupDescriptor] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "TabSetDescriptor":
        data = _require_mapping(data, "tab set descriptor")
        raw = data.get("groups", data.get("tabs", []))
        if not isinstance(raw, list):
            raise InvalidDescriptor("tab set: 'groups' must be a list")
        return cls(
            title=str(data.get("title") or ""),
            groups=[GroupDescriptor.from_dict(item) for item in raw],
        )


@dataclass
class Diagnostic:
    code: str
    message: str
    field: str = ""
    severity: str = "error"
    # `field` is shadowed by the attribute above.
    context: dict[str, Any] = dataclasses.field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "severity": self.severity,
            "context": self.context,
        }


@dataclass
class ValidationSnapshot:
    total: int = 0
    valid: int = 0
    invalid: int = 0
    errors: dict[str, str] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.invalid == 0

    def conflicts(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.code == "CROSS_GROUP_CONFLICT"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "total": self.total,
            "valid": self.valid,
            "invalid": self.invalid,
            "errors": self.errors,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
