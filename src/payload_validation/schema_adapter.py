"""Normalise external schema descriptions into canonical field rules.

Supported rule shapes, per field:

- a full rule: ``{"type": "string", "required": True}``
- a bare type: ``str``, ``TypeDescriptor.NUMBER`` or ``"ObjectId"``
- an array shorthand: ``[str]`` (``[]`` for an unchecked array)
- a nested object shorthand: ``{"street": str, "zipcode": str}``

Problems are collected for the whole schema and reported together.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from .errors import SchemaDefinitionError
from .types import FieldRule, Schema, TypeDescriptor, join_path

TYPE_NAMES: dict[str, TypeDescriptor] = {
    "string": TypeDescriptor.STRING,
    "str": TypeDescriptor.STRING,
    "number": TypeDescriptor.NUMBER,
    "int": TypeDescriptor.NUMBER,
    "integer": TypeDescriptor.NUMBER,
    "float": TypeDescriptor.NUMBER,
    "decimal": TypeDescriptor.NUMBER,
    "boolean": TypeDescriptor.BOOLEAN,
    "bool": TypeDescriptor.BOOLEAN,
    "date": TypeDescriptor.DATE,
    "datetime": TypeDescriptor.DATE,
    "objectid": TypeDescriptor.OBJECT_ID,
    "object_id": TypeDescriptor.OBJECT_ID,
    "objectidentifier": TypeDescriptor.OBJECT_ID,
    "object": TypeDescriptor.OBJECT,
    "dict": TypeDescriptor.OBJECT,
    "map": TypeDescriptor.OBJECT,
    "array": TypeDescriptor.ARRAY,
    "list": TypeDescriptor.ARRAY,
    "mixed": TypeDescriptor.UNKNOWN,
    "any": TypeDescriptor.UNKNOWN,
    "buffer": TypeDescriptor.UNKNOWN,
    "unknown": TypeDescriptor.UNKNOWN,
}

# bool must precede int; it is a subclass.
PYTHON_TYPES: tuple[tuple[type, TypeDescriptor], ...] = (
    (bool, TypeDescriptor.BOOLEAN),
    (str, TypeDescriptor.STRING),
    (int, TypeDescriptor.NUMBER),
    (float, TypeDescriptor.NUMBER),
    (datetime, TypeDescriptor.DATE),
    (date, TypeDescriptor.DATE),
    (dict, TypeDescriptor.OBJECT),
    (list, TypeDescriptor.ARRAY),
    (tuple, TypeDescriptor.ARRAY),
)

ITEM_TYPE_KEYS = ("item_type", "itemType", "items")


@dataclass
class SchemaCheck:
    """Outcome of normalising a schema: either a schema or its errors."""

    schema: Optional[Schema] = None
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return self.schema is not None and not self.errors


def resolve_type(token: Any) -> Optional[TypeDescriptor]:
    """Map a type token to a descriptor, or ``None`` if it is not one."""
    if isinstance(token, TypeDescriptor):
        return token
    if isinstance(token, str):
        return TYPE_NAMES.get(token.strip().lower())
    if isinstance(token, type):
        for python_type, descriptor in PYTHON_TYPES:
            if token is python_type:
                return descriptor
        for python_type, descriptor in PYTHON_TYPES:
            if issubclass(token, python_type):
                return descriptor
    return None


def _unwrap(raw: Any) -> Any:
    """Return the field mapping held by a schema wrapper object."""
    seen = 0
    while not isinstance(raw, Mapping) and hasattr(raw, "schema") and seen < 8:
        raw = raw.schema
        seen += 1
    return raw


class _Normalizer:
    def __init__(self) -> None:
        self.errors: list[str] = []

    def error(self, path: str | None, message: str) -> None:
        self.errors.append(f"{path}: {message}" if path else message)

    def schema(self, raw: Any, base_path: str | None = None) -> dict[str, FieldRule]:
        raw = _unwrap(raw)
        if not isinstance(raw, Mapping):
            self.error(base_path, "schema must be a mapping of field names to rules")
            return {}

        rules: dict[str, FieldRule] = {}
        for key, raw_rule in raw.items():
            if not isinstance(key, str) or not key:
                self.error(base_path, f"field name {key!r} must be a non-empty string")
                continue
            rule = self.rule(raw_rule, join_path(base_path, key))
            if rule is not None:
                rules[key] = rule
        return rules

    def rule(self, raw: Any, path: str) -> Optional[FieldRule]:
        if isinstance(raw, FieldRule):
            return raw
        if isinstance(raw, (list, tuple)):
            return self.array_rule(raw, path)
        if isinstance(raw, Mapping):
            if "type" not in raw:
                return FieldRule(TypeDescriptor.OBJECT, properties=self.schema(raw, path))
            return self.full_rule(raw, path)

        descriptor = resolve_type(raw)
        if descriptor is None:
            self.error(path, f"cannot determine field type from {raw!r}")
            return None
        return FieldRule(descriptor)

    def array_rule(
        self, raw: Any, path: str, required: bool = False
    ) -> Optional[FieldRule]:
        if len(raw) > 1:
            self.error(path, "array shorthand takes at most one item type")
            return None
        item_type = self.item_type(raw[0], path) if raw else None
        return FieldRule(TypeDescriptor.ARRAY, required=required, item_type=item_type)

    def item_type(self, raw: Any, path: str) -> Optional[TypeDescriptor]:
        # Nested structures inside arrays are accepted but not item-checked.
        if isinstance(raw, Mapping):
            if "type" not in raw:
                return TypeDescriptor.OBJECT
            raw = raw["type"]
        if isinstance(raw, (list, tuple)):
            return TypeDescriptor.ARRAY

        descriptor = resolve_type(raw)
        if descriptor is None:
            self.error(path, f"cannot determine item type from {raw!r}")
        return descriptor

    def full_rule(self, raw: Mapping[str, Any], path: str) -> Optional[FieldRule]:
        required = raw.get("required", False)
        if not isinstance(required, bool):
            self.error(path, "'required' must be a boolean")
            required = False

        raw_type = raw["type"]
        if isinstance(raw_type, (list, tuple)):
            return self.array_rule(raw_type, path, required=required)

        descriptor = resolve_type(raw_type)
        if descriptor is None:
            self.error(path, f"cannot determine field type from {raw_type!r}")
            return None

        properties = None
        if descriptor is TypeDescriptor.OBJECT and raw.get("properties") is not None:
            properties = self.schema(raw["properties"], path)

        item_type = None
        if descriptor is TypeDescriptor.ARRAY:
            for key in ITEM_TYPE_KEYS:
                if raw.get(key) is not None:
                    item_type = self.item_type(raw[key], path)
                    break

        return FieldRule(
            descriptor, required=required, properties=properties, item_type=item_type
        )


def check_schema(raw: Any) -> SchemaCheck:
    """Normalise ``raw`` into a schema, collecting every shape error."""
    normalizer = _Normalizer()
    schema = normalizer.schema(raw)
    if normalizer.errors:
        return SchemaCheck(errors=normalizer.errors)
    return SchemaCheck(schema=schema)


def normalize_schema(raw: Any) -> Schema:
    """Normalise ``raw`` into a schema or raise :class:`SchemaDefinitionError`."""
    result = check_schema(raw)
    if not result.valid:
        raise SchemaDefinitionError(result.errors)
    return result.schema


__all__ = [
    "SchemaCheck",
    "TYPE_NAMES",
    "check_schema",
    "normalize_schema",
    "resolve_type",
]
