"""Named admin URL patterns used by column render functions.

Render functions receive only the record, so the route table is bound
when the entity schemas are built at startup.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

DEFAULT_ROUTES: dict[str, str] = {
    "records.edit": "/admin/entities/{entity}/{id}/edit",
    "records.view": "/{entity}/{id}",
    "comments.edit": "/admin/comments/{id}/edit",
    "users.edit": "/admin/users/{id}/edit",
}


class RouteTable:
    """Resolve named routes to URLs."""

    def __init__(self, overrides: Mapping[str, str] | None = None) -> None:
        self._patterns = {**DEFAULT_ROUTES, **(overrides or {})}

    def url(self, name: str, **params: Any) -> str:
        try:
            pattern = self._patterns[name]
        except KeyError:
            msg = f"Unknown route: {name!r}"
            raise KeyError(msg) from None
        return pattern.format(**params)


def limit_text(value: str | None, limit: int, end: str = "...") -> str:
    """Truncate *value* to *limit* characters, appending *end* if cut.

    Examples:
        >>> limit_text("hello world", 5)
        'hello...'
        >>> limit_text("short", 70)
        'short'
    """
    text = value or ""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + end
