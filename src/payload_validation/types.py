"""Core data types shared by the type checker and the schema validator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional


class TypeDescriptor(str, Enum):
    """Closed set of kinds a field value can be declared as.

    The value of each member is the name reported in violation messages.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "Date"
    OBJECT_ID = "ObjectId"
    OBJECT = "object"
    ARRAY = "array"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FieldRule:
    """Per-field rule: expected type, required flag and nesting details."""

    type: TypeDescriptor
    required: bool = False
    properties: Optional[Mapping[str, "FieldRule"]] = None
    item_type: Optional[TypeDescriptor] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value, "required": self.required}
        if self.properties is not None:
            data["properties"] = {
                key: rule.to_dict() for key, rule in self.properties.items()
            }
        if self.item_type is not None:
            data["item_type"] = self.item_type.value
        return data


Schema = Mapping[str, FieldRule]


@dataclass(frozen=True)
class Violation:
    """A single located conformance failure."""

    path: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


def join_path(base_path: str | None, key: str) -> str:
    """Return the dot-delimited path of ``key`` below ``base_path``."""
    return f"{base_path}.{key}" if base_path else key
