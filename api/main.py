"""
Payload Validator API Service

FastAPI service exposing the schema registry.
Handles:
- Listing and describing registered schemas
- Validating request payloads against a named schema
"""

import logging
from datetime import datetime
from typing import Any, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from api.exceptions import SchemaNotFoundError, SchemaValidationError
from api.middleware import check_payload, read_json_body
from src.payload_validation import PayloadValidator, SchemaDefinitionError
from src.payload_validation.registry import SchemaRegistry
from src.utils import get_env_config, resolve_path
from src.utils.paths import find_repo_root

config = get_env_config()
logging.basicConfig(level=getattr(logging, config["log_level"], logging.INFO))
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Payload Validator API",
    description="Declarative validation of request payloads",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config["cors_allow_origins"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

schema_registry: Optional[SchemaRegistry] = None


@app.on_event("startup")
async def startup_event() -> None:
    """Load schema definitions from the configured directory."""
    global schema_registry
    schema_registry = _init_registry()


# Pydantic models
class SchemaSummary(BaseModel):
    """Registered schema and whether its definition is usable."""
    name: str
    valid: bool
    errors: list[str] = Field(default_factory=list)


class SchemaDetail(SchemaSummary):
    """Schema with its normalised field rules."""
    rules: dict[str, Any] = Field(default_factory=dict)


class ValidationResponse(BaseModel):
    """Response for an accepted payload."""
    schema_name: str
    valid: bool = True
    validated_at: str


def _init_registry() -> SchemaRegistry:
    """Build the schema registry from environment configuration."""
    repo_root = find_repo_root(resolve_path(__file__).parent)
    schema_dir = resolve_path(config["schema_dir"], str(repo_root))
    return SchemaRegistry.from_directory(schema_dir)


async def get_schema_registry() -> SchemaRegistry:
    if schema_registry is None:
        raise HTTPException(status_code=500, detail="Schema registry not initialized")
    return schema_registry


def _get_validator(name: str, registry: SchemaRegistry) -> PayloadValidator:
    validator = registry.get(name)
    if validator is None:
        raise SchemaNotFoundError(f"Schema '{name}' not found").to_http_exception()
    return validator


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


@app.get("/schemas", response_model=list[SchemaSummary])
async def list_schemas(registry: SchemaRegistry = Depends(get_schema_registry)):
    """List registered schemas."""
    summaries = []
    for name in registry:
        validator = registry.get(name)
        summaries.append(
            SchemaSummary(
                name=name,
                valid=validator.schema_valid,
                errors=validator.schema_errors,
            )
        )
    return summaries


@app.get("/schemas/{name}", response_model=SchemaDetail)
async def get_schema(name: str, registry: SchemaRegistry = Depends(get_schema_registry)):
    """Describe a schema using its normalised field rules."""
    validator = _get_validator(name, registry)
    rules = {}
    if validator.schema is not None:
        rules = {key: rule.to_dict() for key, rule in validator.schema.items()}

    return SchemaDetail(
        name=name,
        valid=validator.schema_valid,
        errors=validator.schema_errors,
        rules=rules,
    )


@app.post("/schemas/{name}/validate", response_model=ValidationResponse)
async def validate_against_schema(
    name: str,
    request: Request,
    registry: SchemaRegistry = Depends(get_schema_registry),
):
    """Validate the request body against a registered schema."""
    validator = _get_validator(name, registry)
    try:
        validator.require_schema()
    except SchemaDefinitionError as exc:
        logger.error("Schema '%s' is malformed: %s", name, exc)
        raise SchemaValidationError().to_http_exception() from exc

    payload = await read_json_body(request)
    check_payload(validator, payload)

    return ValidationResponse(
        schema_name=name,
        validated_at=datetime.utcnow().isoformat() + "Z",
    )
