"""Exception taxonomy for widget construction, values and serialization."""

from __future__ import annotations


class FormdeckError(Exception):
    """Base class for every error raised by form_core."""


class ConstructionError(FormdeckError):
    """A descriptor could not be turned into a widget or container."""


class InvalidDescriptor(ConstructionError):
    pass


class UnsupportedKind(ConstructionError):
    def __init__(self, kind: str):
        super().__init__(f"unsupported widget kind: {kind!r}")
        self.kind = kind


class BatchConstructionError(ConstructionError):
    """Raised by build_all; points at the first descriptor that failed."""

    def __init__(self, index: int, name: str, cause: ConstructionError):
        super().__init__(f"widget {index} ({name or '<unnamed>'}): {cause}")
        self.index = index
        self.name = name
        self.cause = cause


class WidgetValueError(FormdeckError, ValueError):
    """set_value rejected a value; the widget state is unchanged."""


class TypeMismatch(WidgetValueError):
    pass


class RangeError(WidgetValueError):
    pass


class UnknownSelectionId(WidgetValueError):
    pass


class SerializationError(FormdeckError):
    def __init__(self, name: str, value: object):
        super().__init__(f"value of widget {name!r} is not serializable: {type(value).__name__}")
        self.name = name
        self.value = value


class ConfigError(FormdeckError, ValueError):
    """Key profile or user config file could not be resolved."""


class TerminalUnavailable(FormdeckError):
    """Interactive mode was requested without a usable terminal on stdin."""
