"""Request payload validation against declarative schemas."""

from .errors import SchemaDefinitionError
from .schema_adapter import SchemaCheck, check_schema, normalize_schema
from .type_checker import check_items, check_type, kind_of
from .types import FieldRule, Schema, TypeDescriptor, Violation
from .validator import (
    Outcome,
    PayloadValidator,
    ValidationOutcome,
    validate,
    validate_request,
)

__all__ = [
    "FieldRule",
    "Outcome",
    "PayloadValidator",
    "Schema",
    "SchemaCheck",
    "SchemaDefinitionError",
    "TypeDescriptor",
    "ValidationOutcome",
    "Violation",
    "check_items",
    "check_schema",
    "check_type",
    "kind_of",
    "normalize_schema",
    "validate",
    "validate_request",
]
