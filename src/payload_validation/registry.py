"""Named schemas loaded from a directory of definition files."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

from ..utils.schema_validator import SCHEMA_SUFFIXES, load_schema_definition
from .errors import SchemaDefinitionError
from .schema_adapter import SchemaCheck
from .validator import PayloadValidator

logger = logging.getLogger(__name__)


@dataclass
class SchemaRegistry:
    """Maps schema names to validators.

    Schemas that fail to load are kept as invalid validators so requests
    against them surface a schema error instead of a missing schema.
    """

    validators: dict[str, PayloadValidator] = field(default_factory=dict)

    def register(self, name: str, schema: Any) -> PayloadValidator:
        validator = PayloadValidator(schema, name=name)
        self.validators[name] = validator
        return validator

    def get(self, name: str) -> PayloadValidator | None:
        return self.validators.get(name)

    def names(self) -> list[str]:
        return sorted(self.validators)

    def __contains__(self, name: object) -> bool:
        return name in self.validators

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self.validators)

    @classmethod
    def from_directory(cls, directory: str | Path) -> "SchemaRegistry":
        """Load every schema definition file in ``directory``, keyed by stem."""
        registry = cls()
        root = Path(directory)

        if not root.is_dir():
            logger.warning("[Schema] Schema directory not found: %s", root)
            return registry

        for path in sorted(root.iterdir()):
            if path.suffix not in SCHEMA_SUFFIXES:
                continue
            try:
                schema = load_schema_definition(path)
            except SchemaDefinitionError as exc:
                registry.register(path.stem, SchemaCheck(errors=exc.errors))
                continue
            registry.register(path.stem, schema)

        logger.info("[Schema] Loaded %d schemas from %s", len(registry), root)
        return registry


__all__ = ["SchemaRegistry"]
