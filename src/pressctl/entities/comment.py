"""Comment moderation list."""

from __future__ import annotations

from typing import Any

from pressctl.domain.columns import ColumnSpec
from pressctl.domain.fields import FieldSpec
from pressctl.domain.schema import Schema, build_schema
from pressctl.domain.types import Align, FieldKind
from pressctl.entities.routes import RouteTable, limit_text

ENTITY = "comment"

APPROVED_MARK = "✓"
PENDING_MARK = "✗"
MISSING_MARK = "—"


def _columns(routes: RouteTable, excerpt_length: int) -> tuple[ColumnSpec, ...]:
    def status(comment: Any) -> str:
        return APPROVED_MARK if comment.approved else PENDING_MARK

    def content(comment: Any) -> str:
        url = routes.url("comments.edit", id=comment.id)
        return f"{limit_text(comment.content, excerpt_length)} <{url}>"

    def recording(comment: Any) -> str:
        if comment.post is None:
            return MISSING_MARK
        return routes.url("records.edit", entity=comment.post.entity, id=comment.post.id)

    def user(comment: Any) -> str:
        if comment.user_id is None:
            return MISSING_MARK
        return routes.url("users.edit", id=comment.user_id)

    return (
        ColumnSpec(name="approved", label="Status", render=status),
        ColumnSpec(name="content", label="Content", render=content),
        ColumnSpec(name="post_id", label="Recording", render=recording, align=Align.CENTER),
        ColumnSpec(name="user_id", label="User", render=user, align=Align.CENTER),
        ColumnSpec(name="updated_at", label="Last edit"),
    )


def build_comment_schema(routes: RouteTable | None = None, *, excerpt_length: int = 70) -> Schema:
    """Build the ``comment`` schema used by the moderation list."""
    return build_schema(
        ENTITY,
        fields=(
            FieldSpec(name="content", kind=FieldKind.TEXTAREA, required=True, title="Content"),
            FieldSpec(name="approved", kind=FieldKind.CHECKBOX, title="Approved"),
        ),
        columns=_columns(routes or RouteTable(), excerpt_length),
        name="Comments",
        title="Comments",
    )
