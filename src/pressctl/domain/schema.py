"""Schema — the declarative description of one content entity.

A Schema bundles an entity's form fields, list columns, validation rules,
list filters and many-to-many associations.  It is built once at startup
and never mutated; the generic resource engine is parameterized by it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import NewType

from pydantic import BaseModel, Field

from pressctl.domain.columns import ColumnSpec
from pressctl.domain.errors import DuplicateFieldError, InvalidPatternError, UnknownFieldError
from pressctl.domain.fields import FieldSpec
from pressctl.domain.rules import ValidationRule, compile_pattern
from pressctl.domain.types import FormSection, ListFilter, RuleKind, SyncMode

SchemaId = NewType("SchemaId", str)

# Record attributes stored outside the content payload.  Rules may target
# them without a matching field declaration.
RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    {"id", "status", "publish_at", "created_at", "updated_at"},
)


class AssociationSpec(BaseModel):
    """A many-to-many relation synced when a record is saved."""

    model_config = {"frozen": True}

    name: str
    mode: SyncMode = SyncMode.REPLACE


class Schema(BaseModel):
    """Fields, columns, rules and associations of one entity."""

    model_config = {"frozen": True}

    entity: str
    name: str = ""
    description: str = ""
    title: str = ""
    slug_field: str | None = None
    fields: tuple[FieldSpec, ...] = ()
    columns: tuple[ColumnSpec, ...] = ()
    rules: tuple[ValidationRule, ...] = ()
    filters: tuple[ListFilter, ...] = ()
    associations: tuple[AssociationSpec, ...] = Field(default=())

    @property
    def id(self) -> SchemaId:
        return SchemaId(self.entity)

    def field(self, name: str) -> FieldSpec | None:
        """Look up a declared field by name."""
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def fields_in(self, section: FormSection) -> list[FieldSpec]:
        return [f for f in self.fields if f.section is section]

    def column(self, name: str) -> ColumnSpec | None:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def association(self, name: str) -> AssociationSpec | None:
        for assoc in self.associations:
            if assoc.name == name:
                return assoc
        return None

    def association_names(self) -> list[str]:
        return [a.name for a in self.associations]

    def sortable_columns(self) -> list[str]:
        return [c.name for c in self.columns if c.sortable]


def check_schema(schema: Schema) -> None:
    """Enforce the structural invariants of *schema*.

    Raises:
        DuplicateFieldError: Two fields share a name.
        UnknownFieldError: A rule targets a field that is neither declared
            nor a built-in record attribute.
        InvalidPatternError: A field pattern or ``pattern`` rule does not
            compile.
    """
    seen: set[str] = set()
    for spec in schema.fields:
        if spec.name in seen:
            raise DuplicateFieldError(schema.entity, spec.name)
        seen.add(spec.name)
        if spec.pattern is not None:
            _check_pattern(schema.entity, spec.name, f"^(?:{spec.pattern})$")

    known = seen | RECORD_ATTRIBUTES
    for rule in schema.rules:
        if rule.field not in known and rule.leaf not in known:
            raise UnknownFieldError(schema.entity, rule.field)
        if rule.kind is RuleKind.PATTERN:
            _check_pattern(schema.entity, rule.field, rule.argument or "")


def _check_pattern(entity: str, path: str, pattern: str) -> None:
    try:
        compile_pattern(pattern)
    except re.error as exc:
        raise InvalidPatternError(entity, path, pattern, str(exc)) from None


def build_schema(
    entity: str,
    fields: Iterable[FieldSpec] = (),
    columns: Iterable[ColumnSpec] = (),
    rules: Iterable[ValidationRule] = (),
    **metadata: object,
) -> Schema:
    """Construct a Schema and check its invariants."""
    schema = Schema(
        entity=entity,
        fields=tuple(fields),
        columns=tuple(columns),
        rules=tuple(rules),
        **metadata,  # type: ignore[arg-type]
    )
    check_schema(schema)
    return schema
