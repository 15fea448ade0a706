"""Validation Evaluator — apply a schema's rules to submitted data.

Rules for a path come from its field's declared constraints first
(``required``, ``max_length``, ``pattern``) and then from explicit rules.
Wildcard paths (``content.*.name``) are expanded against the submission
before evaluation.

INVARIANT: evaluation stops at the first failing rule of a concrete path,
but every path is evaluated before the result is returned.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol

from pydantic import BaseModel, Field

from pressctl.domain.errors import ConstraintViolation, FieldError, LookupRequiredError
from pressctl.domain.fields import FieldSpec
from pressctl.domain.rules import WILDCARD, ValidationRule, compile_pattern
from pressctl.domain.schema import RECORD_ATTRIBUTES, Schema
from pressctl.domain.types import FieldKind, RecordStatus, RuleKind

_MISSING = object()

_TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})
_FALSE_STRINGS = frozenset({"0", "false", "off", "no", ""})

# Rules that decide whether the remaining rules run at all.
_GATE_ORDER = {RuleKind.SOMETIMES: 0, RuleKind.REQUIRED: 1}

# Record attributes every entity stores natively; checked when submitted.
_ATTRIBUTE_RULES: tuple[ValidationRule, ...] = (
    ValidationRule(field="status", kind=RuleKind.SOMETIMES),
    ValidationRule(field="status", kind=RuleKind.REQUIRED),
    ValidationRule(
        field="status", kind=RuleKind.IN, argument=",".join(s.value for s in RecordStatus)
    ),
)


class UniqueLookup(Protocol):
    """Persistence collaborator answering uniqueness questions."""

    def exists(
        self,
        table: str,
        field: str,
        value: Any,
        *,
        exclude_id: int | None = None,
    ) -> bool: ...


@dataclass(frozen=True)
class ValidationContext:
    """Explicit per-request inputs to :func:`validate`.

    Attributes:
        lookup: Collaborator for ``unique`` rules.
        record_id: Id of the record being updated; excluded from
            uniqueness checks.
    """

    lookup: UniqueLookup | None = None
    record_id: int | None = None


class ValidationResult(BaseModel):
    """Either validated data (``ok``) or the list of field errors."""

    model_config = {"frozen": True}

    ok: bool
    data: dict[str, Any] = Field(default_factory=dict)
    errors: list[FieldError] = Field(default_factory=list)

    def error_for(self, field: str) -> FieldError | None:
        for error in self.errors:
            if error.field == field:
                return error
        return None


# ---------------------------------------------------------------------------
# Rule planning
# ---------------------------------------------------------------------------


def _constraint_rules(spec: FieldSpec) -> list[ValidationRule]:
    rules: list[ValidationRule] = []
    if spec.required:
        rules.append(ValidationRule(field=spec.name, kind=RuleKind.REQUIRED))
    if spec.max_length is not None:
        rules.append(
            ValidationRule(field=spec.name, kind=RuleKind.MAX, argument=str(spec.max_length))
        )
    if spec.pattern is not None:
        rules.append(
            ValidationRule(
                field=spec.name, kind=RuleKind.PATTERN, argument=f"^(?:{spec.pattern})$"
            )
        )
    return rules


def plan_rules(schema: Schema) -> dict[str, list[ValidationRule]]:
    """Group every applicable rule by declared path, gate rules first."""
    plan: dict[str, list[ValidationRule]] = {}
    for spec in schema.fields:
        plan.setdefault(spec.name, []).extend(_constraint_rules(spec))
    for rule in (*_ATTRIBUTE_RULES, *schema.rules):
        bucket = plan.setdefault(rule.field, [])
        if rule not in bucket:
            bucket.append(rule)
    for path, bucket in plan.items():
        plan[path] = sorted(bucket, key=lambda r: _GATE_ORDER.get(r.kind, 2))
    return {path: bucket for path, bucket in plan.items() if bucket}


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def expand_path(data: Any, path: str) -> list[str]:
    """Expand ``*`` segments of *path* against *data*.

    A wildcard over a missing or scalar value expands to nothing.

    Examples:
        >>> expand_path({"content": {"en": {}, "ru": {}}}, "content.*.name")
        ['content.en.name', 'content.ru.name']
        >>> expand_path({}, "title")
        ['title']
    """
    prefixes: list[tuple[list[str], Any]] = [([], data)]
    for segment in path.split("."):
        next_prefixes: list[tuple[list[str], Any]] = []
        for parts, node in prefixes:
            if segment == WILDCARD:
                if isinstance(node, Mapping):
                    children = [(str(k), v) for k, v in node.items()]
                elif isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
                    children = [(str(i), v) for i, v in enumerate(node)]
                else:
                    children = []
                next_prefixes.extend(([*parts, key], child) for key, child in children)
            else:
                next_prefixes.append(([*parts, segment], _child(node, segment)))
        prefixes = next_prefixes
    return [".".join(parts) for parts, _ in prefixes]


def _child(node: Any, segment: str) -> Any:
    if isinstance(node, Mapping):
        return node.get(segment, _MISSING)
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)) and segment.isdigit():
        index = int(segment)
        return node[index] if index < len(node) else _MISSING
    return _MISSING


def lookup_path(data: Any, path: str) -> Any:
    """Return the value at a concrete dotted *path*, or ``_MISSING``."""
    node = data
    for segment in path.split("."):
        node = _child(node, segment)
        if node is _MISSING:
            return _MISSING
    return node


def _is_empty(value: Any) -> bool:
    if value is _MISSING or value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return not value
    return False


# ---------------------------------------------------------------------------
# Rule checks
# ---------------------------------------------------------------------------


def _matches_type(value: Any, type_name: str) -> bool:
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "integer":
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        return isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()) is not None
    if type_name == "numeric":
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        if isinstance(value, str):
            try:
                float(value)
            except ValueError:
                return False
            return True
        return False
    if type_name == "boolean":
        if isinstance(value, bool) or value in (0, 1):
            return True
        return isinstance(value, str) and value.strip().lower() in _TRUE_STRINGS | _FALSE_STRINGS
    if type_name == "array":
        return isinstance(value, (list, tuple, dict))
    if type_name == "date":
        if isinstance(value, (date, datetime)):
            return True
        if isinstance(value, str):
            try:
                datetime.fromisoformat(value.strip())
            except ValueError:
                return False
            return True
        return False
    return True


def _exceeds_max(value: Any, limit: int) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > limit
    if isinstance(value, (int, float)):
        return value > limit
    return False


def _check_rule(
    rule: ValidationRule,
    path: str,
    value: Any,
    schema: Schema,
    context: ValidationContext,
) -> FieldError | None:
    if rule.kind is RuleKind.TYPE:
        type_name = rule.argument or "string"
        if not _matches_type(value, type_name):
            return FieldError(field=path, rule=str(rule.kind), message=f"must be {type_name}")
    elif rule.kind is RuleKind.MAX:
        limit = int(rule.argument or 0)
        if _exceeds_max(value, limit):
            return FieldError(
                field=path, rule=str(rule.kind), message=f"may not be greater than {limit}"
            )
    elif rule.kind is RuleKind.PATTERN:
        pattern = compile_pattern(rule.argument or "")
        if not isinstance(value, str) or pattern.search(value) is None:
            return FieldError(field=path, rule=str(rule.kind), message="format is invalid")
    elif rule.kind is RuleKind.IN:
        allowed = [part.strip() for part in (rule.argument or "").split(",")]
        if str(value) not in allowed:
            return FieldError(
                field=path, rule=str(rule.kind), message=f"must be one of {', '.join(allowed)}"
            )
    elif rule.kind is RuleKind.UNIQUE:
        if context.lookup is None:
            msg = f"Rule 'unique' on {path!r} needs a lookup collaborator"
            raise LookupRequiredError(msg)
        table = rule.argument or schema.entity
        if context.lookup.exists(table, rule.leaf, value, exclude_id=context.record_id):
            return ConstraintViolation(
                field=path, message="has already been taken", value=value
            )
    return None


def _evaluate_path(
    rules: list[ValidationRule],
    path: str,
    value: Any,
    schema: Schema,
    context: ValidationContext,
) -> FieldError | None:
    for rule in rules:
        if rule.kind is RuleKind.SOMETIMES:
            if value is _MISSING:
                return None
            continue
        if rule.kind is RuleKind.REQUIRED:
            if _is_empty(value):
                return FieldError(field=path, rule=str(rule.kind), message="is required")
            continue
        if _is_empty(value):
            return None
        error = _check_rule(rule, path, value, schema, context)
        if error is not None:
            return error
    return None


# ---------------------------------------------------------------------------
# Validated data
# ---------------------------------------------------------------------------


def coerce_bool(value: Any) -> bool:
    """Interpret a checkbox submission as a boolean."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def as_member_list(value: Any) -> list[Any]:
    """Normalize a multi-value submission to a list.

    Comma-separated strings are split; ``None`` becomes ``[]``.
    """
    if value is None or value is _MISSING:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set)):
        return [v for v in value if v is not None and v != ""]
    if isinstance(value, Mapping):
        return list(value.values())
    return [value]


def collect_validated(schema: Schema, submitted: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only keys the schema knows about, normalized by field kind."""
    data: dict[str, Any] = {}
    for spec in schema.fields:
        raw = submitted.get(spec.name, _MISSING)
        if spec.kind is FieldKind.CHECKBOX:
            data[spec.name] = False if raw is _MISSING else coerce_bool(raw)
        elif raw is _MISSING:
            continue
        elif spec.is_multi_value:
            data[spec.name] = as_member_list(raw)
        else:
            data[spec.name] = raw

    for name in schema.association_names():
        if name in submitted and name not in data:
            data[name] = as_member_list(submitted[name])

    rule_roots = {rule.segments[0] for rule in schema.rules}
    for key in RECORD_ATTRIBUTES | rule_roots:
        if key in submitted and key not in data:
            data[key] = submitted[key]
    return data


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate(
    schema: Schema,
    submitted: Mapping[str, Any],
    context: ValidationContext | None = None,
) -> ValidationResult:
    """Evaluate every rule of *schema* against *submitted*.

    Returns a result carrying either the validated data or all field
    errors.  Uniqueness failures appear as :class:`ConstraintViolation`.

    Raises:
        LookupRequiredError: A ``unique`` rule applied and *context* has
            no lookup collaborator.
    """
    ctx = context or ValidationContext()
    errors: list[FieldError] = []
    for declared_path, rules in plan_rules(schema).items():
        for path in expand_path(submitted, declared_path):
            value = lookup_path(submitted, path)
            error = _evaluate_path(rules, path, value, schema, ctx)
            if error is not None:
                errors.append(error)

    if errors:
        return ValidationResult(ok=False, errors=errors)
    return ValidationResult(ok=True, data=collect_validated(schema, submitted))
