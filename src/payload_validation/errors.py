"""Exceptions raised for structurally malformed schemas."""

from __future__ import annotations

from typing import Iterable


class SchemaDefinitionError(ValueError):
    """Raised when a schema description cannot be turned into field rules."""

    def __init__(self, errors: Iterable[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid schema definition")


__all__ = ["SchemaDefinitionError"]
