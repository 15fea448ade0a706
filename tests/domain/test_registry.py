"""Tests for the schema registry and schema invariants."""

from __future__ import annotations

import pytest

from pressctl.domain.columns import ColumnSpec
from pressctl.domain.errors import (
    DuplicateFieldError,
    DuplicateSchemaError,
    InvalidPatternError,
    RegistryFrozenError,
    SchemaError,
    UnknownFieldError,
    UnknownSchemaError,
)
from pressctl.domain.fields import FieldSpec
from pressctl.domain.registry import SchemaRegistry, default_registry
from pressctl.domain.rules import ValidationRule, parse_rules
from pressctl.domain.types import RuleKind


class TestRegisterSchema:
    def test_returns_schema_id(self) -> None:
        reg = SchemaRegistry()
        schema_id = reg.register_schema("page", [FieldSpec(name="name")])
        assert schema_id == "page"
        assert reg.get_schema(schema_id).field_names() == ["name"]

    def test_duplicate_field_names_rejected(self) -> None:
        reg = SchemaRegistry()
        with pytest.raises(DuplicateFieldError) as exc_info:
            reg.register_schema("page", [FieldSpec(name="name"), FieldSpec(name="name")])
        assert exc_info.value.field == "name"
        assert "page" not in reg

    def test_trailing_dot_names_collide(self) -> None:
        """``category.`` is the multi-select form name of ``category``."""
        reg = SchemaRegistry()
        with pytest.raises(DuplicateFieldError):
            reg.register_schema("page", [FieldSpec(name="category."), FieldSpec(name="category")])

    def test_rule_on_undeclared_field_rejected(self) -> None:
        reg = SchemaRegistry()
        with pytest.raises(UnknownFieldError):
            reg.register_schema(
                "page",
                [FieldSpec(name="name")],
                rules=[ValidationRule(field="slug", kind=RuleKind.REQUIRED)],
            )

    def test_wildcard_rule_targets_leaf_field(self) -> None:
        reg = SchemaRegistry()
        reg.register_schema(
            "page",
            [FieldSpec(name="name")],
            rules=parse_rules({"content.*.name": "required|string"}),
        )
        assert len(reg.get_schema("page").rules) == 2

    def test_rule_on_record_attribute_allowed(self) -> None:
        reg = SchemaRegistry()
        reg.register_schema("page", rules=parse_rules({"id": "sometimes|integer"}))
        assert "page" in reg

    def test_invalid_field_pattern_rejected(self) -> None:
        reg = SchemaRegistry()
        with pytest.raises(SchemaError) as exc_info:
            reg.register_schema("page", [FieldSpec(name="code", pattern="(")])
        assert isinstance(exc_info.value, InvalidPatternError)
        assert exc_info.value.path == "code"
        assert "page" not in reg

    def test_invalid_pattern_rule_rejected(self) -> None:
        reg = SchemaRegistry()
        with pytest.raises(InvalidPatternError):
            reg.register_schema(
                "page",
                [FieldSpec(name="code")],
                rules=[ValidationRule(field="code", kind=RuleKind.PATTERN, argument="/[/")],
            )

    def test_duplicate_entity_rejected(self) -> None:
        reg = SchemaRegistry()
        reg.register_schema("page")
        with pytest.raises(DuplicateSchemaError):
            reg.register_schema("page")

    def test_columns_kept_in_order(self) -> None:
        reg = SchemaRegistry()
        reg.register_schema("page", columns=[ColumnSpec(name="b"), ColumnSpec(name="a")])
        assert [c.name for c in reg.get_schema("page").columns] == ["b", "a"]


class TestFrozenRegistry:
    def test_register_after_freeze_fails(self) -> None:
        reg = SchemaRegistry()
        reg.register_schema("page")
        reg.freeze()
        with pytest.raises(RegistryFrozenError):
            reg.register_schema("other")
        assert len(reg) == 1

    def test_unknown_schema(self) -> None:
        reg = SchemaRegistry()
        with pytest.raises(UnknownSchemaError):
            reg.get_schema("missing")

    def test_unknown_schema_is_key_error(self) -> None:
        with pytest.raises(KeyError):
            SchemaRegistry().get_schema("missing")

    def test_default_registry_has_builtins(self) -> None:
        reg = default_registry()
        assert reg.frozen
        assert {s.entity for s in reg} == {"post", "comment"}
        assert default_registry() is reg


class TestSchemaImmutable:
    def test_schema_frozen(self, registry: SchemaRegistry) -> None:
        schema = registry.get_schema("post")
        with pytest.raises(Exception):
            schema.entity = "other"  # type: ignore[misc]

    def test_field_frozen(self) -> None:
        spec = FieldSpec(name="name")
        with pytest.raises(Exception):
            spec.required = True  # type: ignore[misc]
