"""Command group: comment intake and moderation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pressctl.commands._base import PressGroup
from pressctl.services.comments import CommentService

if TYPE_CHECKING:
    from pressctl.commands._context import AppContext

_COMMENT_EXAMPLES = """\
  pressctl comment add "Great article" --post 1 --user 7
  pressctl comment approve 3
  pressctl comment approve 3 --revoke
  pressctl comment list --pending"""


@click.group(cls=PressGroup, examples=_COMMENT_EXAMPLES)
@click.pass_obj
def comment(app: AppContext) -> None:
    """Add and moderate comments."""


@comment.command()
@click.argument("content")
@click.option("--post", "post_id", type=int, default=None, help="Post id.")
@click.option("--user", "user_id", type=int, default=None, help="Author user id.")
@click.option("--approved", is_flag=True, help="Store as already approved.")
@click.pass_obj
def add(
    app: AppContext,
    content: str,
    post_id: int | None,
    user_id: int | None,
    approved: bool,
) -> None:
    """Add a comment."""
    app.emit(
        CommentService(app.site).add(content, post_id=post_id, user_id=user_id, approved=approved)
    )


@comment.command()
@click.argument("comment_id", type=int)
@click.option("--revoke", is_flag=True, help="Withdraw approval instead.")
@click.pass_obj
def approve(app: AppContext, comment_id: int, revoke: bool) -> None:
    """Approve (or un-approve) a comment."""
    app.emit(CommentService(app.site).set_approval(comment_id, not revoke))


@comment.command(name="list")
@click.option("--pending", "state", flag_value="pending", help="Only unapproved comments.")
@click.option("--approved", "state", flag_value="approved", help="Only approved comments.")
@click.option("--limit", default=None, type=int, help="Max rows.")
@click.option("--offset", default=0, type=int, help="Rows to skip.")
@click.pass_obj
def list_cmd(app: AppContext, state: str | None, limit: int | None, offset: int) -> None:
    """Moderation list, most recently edited first."""
    approved = None if state is None else state == "approved"
    app.emit(CommentService(app.site).list(approved=approved, limit=limit, offset=offset))
