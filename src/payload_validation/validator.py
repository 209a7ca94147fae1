"""Recursive schema validation.

``validate`` walks the declared fields of a schema, applies the type checker,
descends into nested objects and array items and reports undeclared keys. It
returns every violation it finds instead of stopping at the first one.

``validate_request`` and :class:`PayloadValidator` add the request-level
guards (malformed schema, absent or empty payload) that short-circuit before
any field is inspected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import SchemaDefinitionError
from .schema_adapter import SchemaCheck, check_schema
from .type_checker import check_items, check_type, is_sequence
from .types import FieldRule, Schema, TypeDescriptor, Violation, join_path

logger = logging.getLogger(__name__)

ADDITIONAL_PROPERTY_MESSAGE = "must NOT have additional properties"


def missing_property_message(key: str) -> str:
    return f"must have required property '{key}'"


def validate(
    payload: Mapping[str, Any], schema: Schema, base_path: str | None = None
) -> list[Violation]:
    """Validate ``payload`` against ``schema`` and return all violations.

    Violations are ordered by field declaration, each field's nested
    violations directly after its own, followed by the undeclared keys of
    this level in payload order.

    Args:
        payload: Mapping to validate. It is never mutated.
        schema: Field rules for this level.
        base_path: Path of ``payload`` from the root, ``None`` at the root.

    Returns:
        A new list of violations, empty when the payload conforms.
    """
    violations: list[Violation] = []

    for key, rule in schema.items():
        path = join_path(base_path, key)

        if key not in payload:
            if rule.required:
                violations.append(Violation(path, missing_property_message(key)))
            continue

        violations.extend(_validate_field(payload[key], rule, path))

    for key in payload:
        if key not in schema:
            violations.append(
                Violation(join_path(base_path, str(key)), ADDITIONAL_PROPERTY_MESSAGE)
            )

    return violations


def _validate_field(value: Any, rule: FieldRule, path: str) -> list[Violation]:
    violations = check_type(value, rule.type, path)

    if rule.type is TypeDescriptor.OBJECT and isinstance(value, Mapping):
        # Without declared properties the object is free-form.
        if rule.properties is not None:
            violations.extend(validate(value, rule.properties, path))
    elif rule.type is TypeDescriptor.ARRAY and is_sequence(value):
        if rule.item_type is not None:
            violations.extend(check_items(value, rule.item_type, path))

    return violations


class Outcome(str, Enum):
    """How a request fared; each failure kind calls for a different remedy."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    BAD_REQUEST = "bad_request"
    INVALID_SCHEMA = "invalid_schema"


@dataclass
class ValidationOutcome:
    """Result of validating one request payload."""

    status: Outcome
    violations: list[Violation] = field(default_factory=list)
    schema_errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is Outcome.ACCEPTED

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "status": self.status.value,
            "valid": self.ok,
            "errors": [violation.to_dict() for violation in self.violations],
        }
        if self.schema_errors:
            data["schema_errors"] = list(self.schema_errors)
        return data


def is_empty_request(payload: Any) -> bool:
    """Return True for payloads that cannot be validated field by field."""
    return not isinstance(payload, Mapping) or len(payload) == 0


def validate_request(payload: Any, schema: Schema) -> ValidationOutcome:
    """Validate a whole request payload against a normalised schema.

    Absent, non-mapping and empty payloads are rejected as a bad request
    before any field is checked.
    """
    if is_empty_request(payload):
        logger.debug("[Validation] Empty or missing payload")
        return ValidationOutcome(status=Outcome.BAD_REQUEST)

    violations = validate(payload, schema)
    if violations:
        logger.debug("[Validation] Payload rejected with %d violations", len(violations))
        return ValidationOutcome(status=Outcome.REJECTED, violations=violations)

    return ValidationOutcome(status=Outcome.ACCEPTED)


class PayloadValidator:
    """Validates payloads against a schema given in any supported shape.

    The schema is normalised once; an already computed :class:`SchemaCheck`
    is used as is. If it is malformed, every call reports
    :attr:`Outcome.INVALID_SCHEMA` without looking at the payload.
    """

    def __init__(self, schema: Any, name: str | None = None):
        self.name = name
        result = schema if isinstance(schema, SchemaCheck) else check_schema(schema)
        self.schema: Schema | None = result.schema
        self.schema_errors: list[str] = result.errors

        if not result.valid:
            logger.warning(
                "[Schema] Invalid schema definition%s: %s",
                f" '{name}'" if name else "",
                "; ".join(self.schema_errors),
            )

    @property
    def schema_valid(self) -> bool:
        return self.schema is not None

    def validate(self, payload: Any) -> ValidationOutcome:
        if self.schema is None:
            return ValidationOutcome(
                status=Outcome.INVALID_SCHEMA, schema_errors=list(self.schema_errors)
            )
        return validate_request(payload, self.schema)

    def require_schema(self) -> Schema:
        """Return the normalised schema or raise if it is malformed."""
        if self.schema is None:
            raise SchemaDefinitionError(self.schema_errors)
        return self.schema


__all__ = [
    "ADDITIONAL_PROPERTY_MESSAGE",
    "Outcome",
    "PayloadValidator",
    "ValidationOutcome",
    "is_empty_request",
    "validate",
    "validate_request",
]
