"""Built-in entity declarations.

Provides register_builtin_schemas(), called once at startup before the
registry is frozen.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from pressctl.entities.comment import build_comment_schema
from pressctl.entities.post import build_post_schema
from pressctl.entities.routes import RouteTable

if TYPE_CHECKING:
    from pressctl.domain.registry import SchemaRegistry


def register_builtin_schemas(
    registry: SchemaRegistry,
    *,
    routes: Mapping[str, str] | None = None,
    excerpt_length: int = 70,
) -> None:
    """Register the ``post`` and ``comment`` schemas on *registry*."""
    table = RouteTable(routes)
    registry.add(build_post_schema(table))
    registry.add(build_comment_schema(table, excerpt_length=excerpt_length))
