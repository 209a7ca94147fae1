"""CLI wrapper for validating a payload file against a schema definition.

The payload may be JSON or YAML. Violations are printed one per line, or as
a JSON document with ``--json``.

Exit codes:
    0  payload accepted
    1  payload rejected with violations
    2  payload empty or unreadable, or schema definition malformed

Example:
    python scripts/validate_payload.py \
        --schema schemas/user.yaml \
        request.json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from src.payload_validation import Outcome, PayloadValidator, SchemaDefinitionError
from src.utils import load_config, resolve_path
from src.utils.schema_validator import load_schema_definition

EXIT_CODES = {
    Outcome.ACCEPTED: 0,
    Outcome.REJECTED: 1,
    Outcome.BAD_REQUEST: 2,
    Outcome.INVALID_SCHEMA: 2,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate a payload against a schema.")
    parser.add_argument(
        "payload",
        help="Path to the JSON or YAML payload to validate.",
    )
    parser.add_argument(
        "--schema",
        required=True,
        help="Path to the schema definition file (JSON or YAML).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the outcome as JSON instead of one violation per line.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    schema_path = resolve_path(args.schema, str(Path.cwd()))
    payload_path = resolve_path(args.payload, str(Path.cwd()))

    try:
        schema = load_schema_definition(schema_path)
    except SchemaDefinitionError as exc:
        for message in exc.errors:
            print(f"schema: {message}", file=sys.stderr)
        return EXIT_CODES[Outcome.INVALID_SCHEMA]

    try:
        payload = load_config(str(payload_path))
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Failed to read payload: {exc}", file=sys.stderr)
        return EXIT_CODES[Outcome.BAD_REQUEST]

    outcome = PayloadValidator(schema, name=schema_path.stem).validate(payload)

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    elif outcome.status is Outcome.BAD_REQUEST:
        print("Bad request: payload is empty or not an object", file=sys.stderr)
    else:
        for violation in outcome.violations:
            print(f"{violation.path}: {violation.message}")
        if outcome.ok:
            print("Payload is valid")

    return EXIT_CODES[outcome.status]


if __name__ == "__main__":
    sys.exit(main())
