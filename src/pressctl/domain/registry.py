"""Schema Registry — process-wide entity declarations.

Populated once at startup, then frozen.  Reads after :meth:`freeze` are
safe from any request because nothing mutates the registry afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from pressctl.domain.columns import ColumnSpec
from pressctl.domain.errors import DuplicateSchemaError, RegistryFrozenError, UnknownSchemaError
from pressctl.domain.fields import FieldSpec
from pressctl.domain.rules import ValidationRule
from pressctl.domain.schema import Schema, SchemaId, build_schema, check_schema

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Holds one Schema per entity slug."""

    def __init__(self) -> None:
        self._schemas: dict[SchemaId, Schema] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register_schema(
        self,
        entity: str,
        fields: Iterable[FieldSpec] = (),
        columns: Iterable[ColumnSpec] = (),
        rules: Iterable[ValidationRule] = (),
        **metadata: Any,
    ) -> SchemaId:
        """Build, check and store a schema for *entity*.

        Raises:
            DuplicateFieldError: Two fields share a name.
            UnknownFieldError: A rule names an undeclared field.
            DuplicateSchemaError: *entity* is already registered.
            RegistryFrozenError: Startup registration has finished.
        """
        schema = build_schema(entity, fields, columns, rules, **metadata)
        return self.add(schema)

    def add(self, schema: Schema) -> SchemaId:
        """Store an already-built schema."""
        if self._frozen:
            msg = f"Cannot register {schema.entity!r}: schema registry is frozen"
            raise RegistryFrozenError(msg)
        check_schema(schema)
        if schema.id in self._schemas:
            msg = f"Schema {schema.entity!r} is already registered"
            raise DuplicateSchemaError(msg)
        self._schemas[schema.id] = schema
        logger.debug("Registered schema: %s", schema.entity)
        return schema.id

    def get_schema(self, schema_id: str) -> Schema:
        """Return the schema registered under *schema_id* (the entity slug)."""
        try:
            return self._schemas[SchemaId(schema_id)]
        except KeyError:
            msg = f"No schema registered for entity {schema_id!r}"
            raise UnknownSchemaError(msg) from None

    def freeze(self) -> None:
        """Reject any further registration."""
        self._frozen = True

    def __contains__(self, schema_id: object) -> bool:
        return schema_id in self._schemas

    def __iter__(self) -> Iterator[Schema]:
        return iter(self._schemas.values())

    def __len__(self) -> int:
        return len(self._schemas)


_default_registry: SchemaRegistry | None = None


def default_registry() -> SchemaRegistry:
    """Return the process-wide registry, populating it on first use.

    Built-in entities are registered and the registry is frozen before
    it is handed out.
    """
    global _default_registry
    if _default_registry is None:
        from pressctl.entities import register_builtin_schemas

        registry = SchemaRegistry()
        register_builtin_schemas(registry)
        registry.freeze()
        _default_registry = registry
    return _default_registry
