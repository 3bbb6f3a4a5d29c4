"""Runtime checks shared by the ``__post_init__`` hooks of the model dataclasses.

Private module, not part of the public API.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from .constants import PORT_NUMBER_MAX


def _wrong_type(name: str, expected: str, value: Any) -> TypeError:
    article = "an" if expected[0] in "AEIOUaeiou" else "a"
    return TypeError(f"{name} must be {article} {expected}, got {type(value).__name__}")


def validate_instance(value: Any, expected: type, name: str) -> None:
    if not isinstance(value, expected):
        raise _wrong_type(name, expected.__name__, value)


def validate_str(value: Any, name: str) -> None:
    """Accept only ``str`` values free of NUL characters."""
    validate_instance(value, str, name)
    if "\x00" in value:
        raise ValueError(f"{name} contains null bytes")


def validate_port_number(value: Any, name: str) -> None:
    """Accept only ``int`` port numbers from 0 to ``PORT_NUMBER_MAX``.

    ``bool`` is rejected even though it subclasses ``int``.
    """
    validate_non_negative_int(value, name)
    if value > PORT_NUMBER_MAX:
        raise ValueError(f"{name} must be <= {PORT_NUMBER_MAX}, got {value}")


def validate_non_negative_int(value: Any, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise _wrong_type(name, "int", value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def freeze_mapping(value: Mapping[str, Any] | None, name: str) -> Mapping[str, Any]:
    """Return a read-only snapshot of *value*; ``None`` yields an empty mapping."""
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, Mapping):
        raise _wrong_type(name, "Mapping", value)
    return MappingProxyType(dict(value))
