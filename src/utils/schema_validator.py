"""Helpers for loading schema definition files.

Definition files are YAML or JSON mappings of field names to rules. The
file contents are checked against a JSON meta schema before the rules are
normalised.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft7Validator

from ..payload_validation.errors import SchemaDefinitionError
from ..payload_validation.schema_adapter import normalize_schema
from ..payload_validation.types import Schema
from .config import load_config

SCHEMA_SUFFIXES = (".yaml", ".yml", ".json")

SCHEMA_DEFINITION_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$ref": "#/definitions/fields",
    "definitions": {
        "fields": {
            "type": "object",
            "additionalProperties": {"$ref": "#/definitions/rule"},
        },
        "type_name": {"type": "string", "minLength": 1},
        "array_shorthand": {
            "type": "array",
            "maxItems": 1,
            "items": {"$ref": "#/definitions/rule"},
        },
        "full_rule": {
            "type": "object",
            "required": ["type"],
            "properties": {
                "type": {
                    "anyOf": [
                        {"$ref": "#/definitions/type_name"},
                        {"$ref": "#/definitions/array_shorthand"},
                    ]
                },
                "required": {"type": "boolean"},
                "properties": {"$ref": "#/definitions/fields"},
                "item_type": {"$ref": "#/definitions/rule"},
                "itemType": {"$ref": "#/definitions/rule"},
                "items": {"$ref": "#/definitions/rule"},
                "description": {"type": "string"},
            },
            "additionalProperties": False,
        },
        "nested_object": {
            "type": "object",
            "not": {"required": ["type"]},
            "additionalProperties": {"$ref": "#/definitions/rule"},
        },
        "rule": {
            "anyOf": [
                {"$ref": "#/definitions/type_name"},
                {"$ref": "#/definitions/array_shorthand"},
                {"$ref": "#/definitions/full_rule"},
                {"$ref": "#/definitions/nested_object"},
            ]
        },
    },
}


def read_definition(schema_path: str | Path) -> Any:
    """Read a definition file, raising :class:`SchemaDefinitionError` on failure."""
    path = Path(schema_path)
    try:
        return load_config(str(path))
    except (OSError, ValueError, yaml.YAMLError) as exc:
        # json.JSONDecodeError is a ValueError.
        raise SchemaDefinitionError(f"{path.name}: {exc}") from exc


def validate_definition(definition: Any) -> dict[str, Any]:
    """Check a raw definition against the definition meta schema."""

    validator = Draft7Validator(SCHEMA_DEFINITION_SCHEMA)
    errors = sorted(validator.iter_errors(definition), key=lambda e: [str(p) for p in e.path])

    return {
        "valid": len(errors) == 0,
        "errors": [
            f"{'.'.join([str(p) for p in error.path]) or '<root>'}: {error.message}"
            for error in errors
        ],
    }


def load_schema_definition(schema_path: str | Path) -> Schema:
    """Load, check and normalise the schema stored in ``schema_path``."""

    definition = read_definition(schema_path)
    result = validate_definition(definition)
    if not result["valid"]:
        raise SchemaDefinitionError(result["errors"])
    return normalize_schema(definition)


def dump_definition(schema: Schema) -> str:
    """Serialise a normalised schema back to JSON."""
    return json.dumps({key: rule.to_dict() for key, rule in schema.items()}, indent=2)
