"""Form field declarations.

A ``FieldSpec`` is an immutable description of one input on an entity's
edit form: its widget kind, its constraints and its labels.  Constraints
declared here (``required``, ``max_length``, ``pattern``) are turned into
validation rules by :mod:`pressctl.domain.validation`, so a field never
needs a duplicate rule string for them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from pressctl.domain.types import FieldKind, FormSection

# Kinds whose submitted value is a list of members rather than a scalar.
MULTI_VALUE_KINDS: frozenset[FieldKind] = frozenset(
    {FieldKind.TAGS, FieldKind.UPLOAD},
)


class FieldSpec(BaseModel):
    """One declared input of an entity form."""

    model_config = {"frozen": True}

    name: str
    kind: FieldKind = FieldKind.TEXT
    title: str = ""
    help: str = ""
    placeholder: str = ""
    required: bool = False
    max_length: int | None = None
    pattern: str | None = None
    mask: str | None = None
    multiple: bool = False
    options: dict[str, str] = Field(default_factory=dict)
    options_source: str | None = None
    group: str | None = None
    section: FormSection = FormSection.FIELDS
    attributes: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            msg = "Field name must not be empty"
            raise ValueError(msg)
        # "category." is the form name of a multi-select; the stored key drops the dot.
        return stripped.rstrip(".")

    @property
    def is_multi_value(self) -> bool:
        """True when submissions carry a list of values."""
        return self.multiple or self.kind in MULTI_VALUE_KINDS


def group(name: str, *fields: FieldSpec) -> tuple[FieldSpec, ...]:
    """Place *fields* on one form row named *name*."""
    return tuple(f.model_copy(update={"group": name}) for f in fields)


def in_section(section: FormSection, *fields: FieldSpec) -> tuple[FieldSpec, ...]:
    """Move *fields* into the given editor *section*."""
    return tuple(f.model_copy(update={"section": section}) for f in fields)


def flatten_fields(*items: FieldSpec | tuple[FieldSpec, ...]) -> tuple[FieldSpec, ...]:
    """Flatten a mix of single fields and field groups, keeping order."""
    flat: list[FieldSpec] = []
    for item in items:
        if isinstance(item, FieldSpec):
            flat.append(item)
        else:
            flat.extend(item)
    return tuple(flat)
