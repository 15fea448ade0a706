"""Validation rule declarations and the pipe-string rule parser.

Rules can be declared directly::

    ValidationRule(field="id", kind=RuleKind.TYPE, argument="integer")

or parsed from the compact pipe syntax used by admin-panel entity
definitions::

    parse_rules({"id": "sometimes|integer|unique:posts"})
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache

from pydantic import BaseModel

from pressctl.domain.types import RuleKind

TYPE_NAMES: frozenset[str] = frozenset(
    {"string", "integer", "numeric", "boolean", "array", "date"},
)

WILDCARD = "*"


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a ``pattern`` rule argument, accepting ``/.../flags`` delimiters.

    Raises:
        re.error: *pattern* is not a valid regular expression.
    """
    if len(pattern) >= 2 and pattern[0] == "/" and pattern.rfind("/") > 0:
        pattern = pattern[1 : pattern.rfind("/")]
    return re.compile(pattern)


class ValidationRule(BaseModel):
    """A single rule applied to a field path at submission time."""

    model_config = {"frozen": True}

    field: str
    kind: RuleKind
    argument: str | None = None

    @property
    def segments(self) -> list[str]:
        return self.field.split(".")

    @property
    def leaf(self) -> str:
        """Last non-wildcard segment of the path (the field it targets)."""
        for segment in reversed(self.segments):
            if segment != WILDCARD:
                return segment
        return self.field

    def describe(self) -> str:
        if self.argument is None:
            return str(self.kind)
        return f"{self.kind}:{self.argument}"


def _parse_token(field: str, token: str) -> ValidationRule:
    name, _, argument = token.partition(":")
    name = name.strip().lower()
    argument = argument.strip()

    if name in TYPE_NAMES:
        return ValidationRule(field=field, kind=RuleKind.TYPE, argument=name)
    if name in ("regex", "pattern"):
        try:
            compile_pattern(argument)
        except re.error as exc:
            msg = f"Rule {name!r} for field {field!r} has an invalid pattern: {exc}"
            raise ValueError(msg) from None
        return ValidationRule(field=field, kind=RuleKind.PATTERN, argument=argument or None)
    try:
        kind = RuleKind(name)
    except ValueError:
        msg = f"Unknown validation rule {token!r} for field {field!r}"
        raise ValueError(msg) from None
    if kind is RuleKind.MAX and not argument.isdigit():
        msg = f"Rule 'max' for field {field!r} needs an integer argument"
        raise ValueError(msg)
    if kind is RuleKind.IN and not argument:
        msg = f"Rule 'in' for field {field!r} needs a list of allowed values"
        raise ValueError(msg)
    return ValidationRule(field=field, kind=kind, argument=argument or None)


def parse_rule_string(field: str, spec: str) -> list[ValidationRule]:
    """Parse ``"required|string|max:255"`` into rules for *field*.

    ``regex:`` arguments may themselves contain ``|``, so a regex token
    consumes the rest of the string.
    """
    rules: list[ValidationRule] = []
    remaining = spec.strip()
    while remaining:
        if remaining.startswith(("regex:", "pattern:")):
            rules.append(_parse_token(field, remaining))
            break
        token, _, remaining = remaining.partition("|")
        if token.strip():
            rules.append(_parse_token(field, token))
    return rules


def parse_rules(
    spec: Mapping[str, str | Iterable[str]],
) -> tuple[ValidationRule, ...]:
    """Parse a ``{path: "rule|rule"}`` mapping into rule objects.

    Values may also be lists of single-rule tokens.
    """
    rules: list[ValidationRule] = []
    for field, value in spec.items():
        if isinstance(value, str):
            rules.extend(parse_rule_string(field, value))
        else:
            rules.extend(_parse_token(field, token) for token in value)
    return tuple(rules)
