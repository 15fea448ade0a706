"""Domain exceptions and per-field error values.

Schema problems are programming errors discovered at startup and are
raised.  Validation failures are data: ``FieldError`` and
``ConstraintViolation`` are returned to the caller as a list, never raised.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class PressError(Exception):
    """Base class for all pressctl exceptions."""


class SchemaError(PressError):
    """A schema declaration is invalid."""


class DuplicateFieldError(SchemaError):
    """Two fields in one schema share a name."""

    def __init__(self, entity: str, field: str) -> None:
        self.entity = entity
        self.field = field
        super().__init__(f"Schema {entity!r} declares field {field!r} more than once")


class UnknownFieldError(SchemaError):
    """A rule or column references a field the schema does not declare."""

    def __init__(self, entity: str, path: str) -> None:
        self.entity = entity
        self.path = path
        super().__init__(f"Schema {entity!r} has a rule for undeclared field {path!r}")


class DuplicateSchemaError(SchemaError):
    """An entity slug is registered twice."""


class RegistryFrozenError(SchemaError):
    """Registration attempted after startup finished."""


class LookupRequiredError(SchemaError):
    """A uniqueness rule was evaluated without a lookup collaborator."""


class InvalidPatternError(SchemaError):
    """A field pattern or ``pattern`` rule is not a valid regular expression."""

    def __init__(self, entity: str, path: str, pattern: str, reason: str) -> None:
        self.entity = entity
        self.path = path
        self.pattern = pattern
        super().__init__(
            f"Schema {entity!r} has an invalid pattern {pattern!r} for {path!r}: {reason}"
        )


class RecordConflictError(PressError):
    """An update targeted an id that is not stored for the record's entity."""

    def __init__(self, entity: str, record_id: int | None) -> None:
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"No stored {entity!r} record with id {record_id}")


class UnknownSchemaError(PressError, KeyError):
    """No schema is registered under the requested id or slug."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Unknown schema"


class FieldError(BaseModel):
    """One failed rule for one concrete field path."""

    model_config = {"frozen": True}

    field: str
    rule: str
    message: str = ""


class ConstraintViolation(FieldError):
    """A uniqueness constraint failed against stored records."""

    rule: str = "unique"
    value: Any = None


class RenderError(BaseModel):
    """A column render function raised while projecting one row."""

    model_config = {"frozen": True}

    column: str
    row: int
    message: str
