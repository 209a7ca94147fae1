"""Custom exception types for the Payload Validator API."""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from src.payload_validation import Outcome, ValidationOutcome, Violation


class PayloadAPIError(Exception):
    """Base class for API-layer errors with HTTP metadata."""

    status_code: int = 500
    user_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        super().__init__(message or self.user_message)
        if status_code is not None:
            self.status_code = status_code
        if message is not None:
            self.user_message = message

    @property
    def detail(self) -> Any:
        return self.user_message

    def to_http_exception(self) -> HTTPException:
        """Convert the error to an :class:`HTTPException`."""

        return HTTPException(status_code=self.status_code, detail=self.detail)


class BadRequestError(PayloadAPIError):
    """Raised when the request body is absent, empty or not an object."""

    status_code = 400
    user_message = "Bad request"


class SchemaNotFoundError(PayloadAPIError):
    """Raised when a request names a schema that is not registered."""

    status_code = 404
    user_message = "Schema not found"


class UnprocessableEntityError(PayloadAPIError):
    """Raised when the payload violates its schema."""

    status_code = 422
    user_message = "Unprocessable entity"

    def __init__(self, violations: list[Violation], message: str | None = None):
        super().__init__(message)
        self.violations = list(violations)

    @property
    def detail(self) -> Any:
        return {
            "message": self.user_message,
            "errors": [violation.to_dict() for violation in self.violations],
        }


class SchemaValidationError(PayloadAPIError):
    """Raised when the schema a route validates against is malformed."""

    status_code = 500
    user_message = "Invalid schema definition"


def error_for_outcome(outcome: ValidationOutcome) -> PayloadAPIError | None:
    """Return the API error matching ``outcome``, or ``None`` if accepted."""

    if outcome.status is Outcome.INVALID_SCHEMA:
        return SchemaValidationError()
    if outcome.status is Outcome.BAD_REQUEST:
        return BadRequestError()
    if outcome.status is Outcome.REJECTED:
        return UnprocessableEntityError(outcome.violations)
    return None


__all__ = [
    "BadRequestError",
    "PayloadAPIError",
    "SchemaNotFoundError",
    "SchemaValidationError",
    "UnprocessableEntityError",
    "error_for_outcome",
]
