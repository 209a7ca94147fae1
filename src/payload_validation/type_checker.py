"""Per-value type checks.

Each check looks at a single value and an expected :class:`TypeDescriptor`
and produces zero or one :class:`Violation`. Field-level and array-item
violations use different wording so callers can tell them apart.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from numbers import Real
from typing import Any, Callable, Iterable

from .types import TypeDescriptor, Violation

OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

# Item types checked inside arrays; nested objects and arrays are not.
ITEM_TYPES = frozenset(
    {
        TypeDescriptor.STRING,
        TypeDescriptor.NUMBER,
        TypeDescriptor.BOOLEAN,
        TypeDescriptor.DATE,
        TypeDescriptor.OBJECT_ID,
    }
)


def kind_of(value: Any) -> str:
    """Return the runtime kind name reported in violation messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Real):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime, date)):
        return "Date"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def is_object_id(value: Any) -> bool:
    return isinstance(value, str) and OBJECT_ID_PATTERN.fullmatch(value) is not None


def is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_date_like(value: Any) -> bool:
    """Return True if ``value`` is a date or can be parsed into one.

    Strings are tried as ISO-8601 first and RFC-2822 second. Numbers are
    read as milliseconds since the Unix epoch.
    """
    if isinstance(value, (datetime, date)):
        return True
    if is_number(value):
        try:
            if not math.isfinite(value):
                return False
            datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, TypeError, ValueError):
            return False
        return True
    if not isinstance(value, str) or not value.strip():
        return False

    text = value.strip()
    try:
        datetime.fromisoformat(text)
        return True
    except ValueError:
        pass
    try:
        parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return False
    return True


_PREDICATES: dict[TypeDescriptor, Callable[[Any], bool]] = {
    TypeDescriptor.STRING: lambda value: isinstance(value, str),
    TypeDescriptor.NUMBER: is_number,
    TypeDescriptor.BOOLEAN: lambda value: isinstance(value, bool),
    TypeDescriptor.DATE: is_date_like,
    TypeDescriptor.OBJECT_ID: is_object_id,
    TypeDescriptor.OBJECT: lambda value: isinstance(value, Mapping),
    TypeDescriptor.ARRAY: is_sequence,
    TypeDescriptor.UNKNOWN: lambda value: True,
}

if set(_PREDICATES) != set(TypeDescriptor):  # pragma: no cover - import guard
    raise RuntimeError("Every TypeDescriptor needs a conformance predicate")


def conforms(value: Any, expected: TypeDescriptor) -> bool:
    """Return True if ``value`` satisfies ``expected``."""
    return _PREDICATES[expected](value)


def type_error_message(path: str, expected: TypeDescriptor, value: Any) -> str:
    return (
        f"'{path}' must be of type '{expected.value}', received '{kind_of(value)}'"
    )


def item_error_message(path: str, expected: TypeDescriptor, item: Any) -> str:
    return (
        f"each item in '{path}' must be of type '{expected.value}', "
        f"received '{kind_of(item)}'"
    )


def check_type(value: Any, expected: TypeDescriptor, path: str) -> list[Violation]:
    """Check a single field value against its declared type.

    Args:
        value: The field value taken from the payload.
        expected: The declared type of the field.
        path: Dot-delimited path of the field from the payload root.

    Returns:
        An empty list when the value conforms, otherwise one violation.
    """
    # Absence of an identifier is the required-field check's concern.
    if expected is TypeDescriptor.OBJECT_ID and value is None:
        return []

    if conforms(value, expected):
        return []
    return [Violation(path, type_error_message(path, expected, value))]


def check_items(
    items: Iterable[Any], item_type: TypeDescriptor, path: str
) -> list[Violation]:
    """Check every item of an array field, in index order.

    Only scalar item types are checked; any other item type yields no
    violations.
    """
    if item_type not in ITEM_TYPES:
        return []

    return [
        Violation(path, item_error_message(path, item_type, item))
        for item in items
        if not conforms(item, item_type)
    ]


__all__ = [
    "ITEM_TYPES",
    "OBJECT_ID_PATTERN",
    "check_items",
    "check_type",
    "conforms",
    "is_date_like",
    "is_object_id",
    "is_sequence",
    "kind_of",
]
