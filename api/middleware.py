"""Request validation dependency for FastAPI routes.

``validate_payload`` builds a dependency that validates the JSON body of a
request against a schema and turns the outcome into the matching HTTP error::

    @app.post("/users")
    async def create_user(payload: dict = Depends(validate_payload(USER_SCHEMA))):
        ...
"""

from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable

from fastapi import Request

from api.exceptions import BadRequestError, error_for_outcome
from src.payload_validation import PayloadValidator

logger = logging.getLogger(__name__)


async def read_json_body(request: Request) -> Any:
    """Return the decoded JSON body, ``None`` for an empty body."""
    body = await request.body()
    if not body.strip():
        return None
    try:
        return json.loads(body)
    except ValueError as exc:
        # Covers JSONDecodeError, UnicodeDecodeError and the int digit limit.
        logger.debug("[Validation] Undecodable request body: %s", exc)
        raise BadRequestError().to_http_exception() from exc


def check_payload(validator: PayloadValidator, payload: Any) -> Any:
    """Validate ``payload``, raising the mapped HTTP error on failure."""
    outcome = validator.validate(payload)
    error = error_for_outcome(outcome)
    if error is not None:
        logger.info(
            "[Validation] %s %s (%d violations)",
            validator.name or "payload",
            outcome.status.value,
            len(outcome.violations),
        )
        raise error.to_http_exception()
    return payload


def validate_payload(
    schema: Any, name: str | None = None
) -> Callable[[Request], Awaitable[Any]]:
    """Create a dependency validating request bodies against ``schema``."""
    if isinstance(schema, PayloadValidator):
        validator = schema
    else:
        validator = PayloadValidator(schema, name=name)

    async def dependency(request: Request) -> Any:
        payload = await read_json_body(request)
        return check_payload(validator, payload)

    return dependency


__all__ = ["check_payload", "read_json_body", "validate_payload"]
