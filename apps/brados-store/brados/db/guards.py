"""
Runtime type guards for untyped document bodies.

Every reader is total: it never raises and signals failure through its return
value. Required-field readers return the value or :data:`FAIL`; tri-state
readers return a :class:`Field` tagged with how the key was found, so callers
decide whether absence or an explicit null is acceptable for that field.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Literal, Mapping, Optional, TypeVar, Union

T = TypeVar("T")


class _Fail(enum.Enum):
    FAIL = "FAIL"

    def __repr__(self) -> str:
        return "FAIL"


FAIL = _Fail.FAIL
"""Rejection marker; compare with ``is``. Never equal to ``False``, ``0`` or ``""``."""

Failable = Union[T, Literal[_Fail.FAIL]]


class Presence(enum.Enum):
    ABSENT = "absent"
    NULL = "null"
    INVALID = "invalid"
    VALUE = "value"


@dataclass(frozen=True)
class Field(Generic[T]):
    """Outcome of reading one optional key."""

    state: Presence
    value: Optional[T] = None

    def nullable(self) -> Failable[Optional[T]]:
        """Key must be present; a value or an explicit null are both accepted."""
        if self.state is Presence.VALUE:
            return self.value
        if self.state is Presence.NULL:
            return None
        return FAIL

    def optional(self) -> Failable[Optional[T]]:
        """Absent and null both decode to ``None``; only a wrong type fails."""
        if self.state is Presence.INVALID:
            return FAIL
        return self.value if self.state is Presence.VALUE else None


def failed(*values: Any) -> bool:
    return any(value is FAIL for value in values)


def is_record(value: Any) -> bool:
    """True for a string-keyed mapping; lists, scalars and ``None`` are not records."""
    return isinstance(value, Mapping) and all(isinstance(key, str) for key in value)


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a number in a document body
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float))


def _read(data: Mapping[str, Any], key: str, check: Callable[[Any], bool]) -> Any:
    value = data.get(key)
    if key in data and check(value):
        return value
    return FAIL


def read_string(data: Mapping[str, Any], key: str) -> Failable[str]:
    return _read(data, key, lambda value: isinstance(value, str))


def read_number(data: Mapping[str, Any], key: str) -> Failable[Union[int, float]]:
    return _read(data, key, is_number)


def read_boolean(data: Mapping[str, Any], key: str) -> Failable[bool]:
    return _read(data, key, lambda value: isinstance(value, bool))


def read_enum(data: Mapping[str, Any], key: str, allowed: Iterable[T]) -> Failable[T]:
    """Read a string that must be one of ``allowed``."""
    choices = tuple(allowed)
    return _read(data, key, lambda value: isinstance(value, str) and value in choices)


def read_field(data: Mapping[str, Any], key: str, check: Callable[[Any], bool]) -> Field[Any]:
    """Classify ``data[key]`` as absent, null, invalid or a value passing ``check``."""
    if key not in data:
        return Field(Presence.ABSENT)
    value = data[key]
    if value is None:
        return Field(Presence.NULL)
    if not check(value):
        return Field(Presence.INVALID)
    return Field(Presence.VALUE, value)


def read_nullable_string(data: Mapping[str, Any], key: str) -> Field[str]:
    return read_field(data, key, lambda value: isinstance(value, str))


def read_nullable_number(data: Mapping[str, Any], key: str) -> Field[Union[int, float]]:
    return read_field(data, key, is_number)


def read_number_array(data: Mapping[str, Any], key: str) -> Field[list]:
    """Read an array of numbers; a single non-numeric element invalidates the whole array."""
    return read_field(data, key, lambda value: isinstance(value, list) and all(is_number(item) for item in value))


def read_string_array(data: Mapping[str, Any], key: str) -> Failable[list]:
    return _read(data, key, lambda value: isinstance(value, list) and all(isinstance(item, str) for item in value))


def decode_each(items: Any, decoder: Callable[[Any], Optional[T]]) -> Failable[list]:
    """Decode every element of ``items``; any rejected element fails the whole list."""
    if not isinstance(items, list):
        return FAIL
    decoded = []
    for item in items:
        result = decoder(item)
        if result is None:
            return FAIL
        decoded.append(result)
    return decoded
