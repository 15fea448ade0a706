"""Command group: create, update, inspect and list entity records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from pressctl.commands._base import PressGroup
from pressctl.domain.errors import UnknownSchemaError
from pressctl.services.resource import ResourceService
from pressctl.services.result import failure

if TYPE_CHECKING:
    from pressctl.commands._context import AppContext

_RECORD_EXAMPLES = """\
  pressctl record create post --set name="Hello" --set title="Hello" \\
      --set body="<p>Hi</p>" --set place="Moscow" --set description="First" --tag news
  pressctl record update post 1 --set phone="(555) 123-4567" --category 2
  pressctl record get post 1
  pressctl record edit post 1
  pressctl record list post --status publish --sort -created_at --limit 10"""


def _parse_value(raw: str) -> Any:
    """Decode JSON objects/arrays/literals; keep everything else as text."""
    stripped = raw.strip()
    if stripped[:1] in ("{", "[") or stripped in ("true", "false", "null"):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            return raw
    return raw


def _collect_submission(
    data_file: str | None,
    assignments: tuple[str, ...],
    *,
    tags: tuple[str, ...] = (),
    categories: tuple[str, ...] = (),
    attachments: tuple[str, ...] = (),
    status: str | None = None,
) -> dict[str, Any]:
    submitted: dict[str, Any] = {}
    if data_file:
        if data_file == "-":
            text = click.get_text_stream("stdin").read()
        else:
            text = Path(data_file).read_text(encoding="utf-8")
        loaded = json.loads(text)
        if not isinstance(loaded, dict):
            msg = "--data must contain a JSON object"
            raise click.BadParameter(msg)
        submitted.update(loaded)

    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key.strip():
            msg = f"Expected KEY=VALUE, got {assignment!r}"
            raise click.BadParameter(msg)
        submitted[key.strip()] = _parse_value(value)

    for name, members in (("tags", tags), ("category", categories), ("attachment", attachments)):
        if members:
            submitted[name] = list(members)
    if status is not None:
        submitted["status"] = status
    return submitted


def _service(app: AppContext, entity: str, op: str) -> ResourceService:
    try:
        return ResourceService.for_entity(app.site, entity)
    except UnknownSchemaError as exc:
        app.emit(failure(op, "UNKNOWN_ENTITY", str(exc)))
        raise click.Abort from exc


def _submission_options(func: Any) -> Any:
    options = [
        click.option("--data", "data_file", default=None, help="JSON object file ('-' = stdin)."),
        click.option("--set", "assignments", multiple=True, help="Field value as KEY=VALUE."),
        click.option("--tag", "tags", multiple=True, help="Tag (repeatable)."),
        click.option("--category", "categories", multiple=True, help="Category id (repeatable)."),
        click.option("--attachment", "attachments", multiple=True, help="Attachment id."),
        click.option(
            "--status",
            type=click.Choice(["draft", "publish"]),
            default=None,
            help="Publication status.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group(cls=PressGroup, examples=_RECORD_EXAMPLES)
@click.pass_obj
def record(app: AppContext) -> None:
    """Create, update, and list entity records."""


@record.command(
    examples="""\
  pressctl record create post --data post.json
  pressctl record create post --data - --tag news --tag events < post.json"""
)
@click.argument("entity")
@_submission_options
@click.pass_obj
def create(
    app: AppContext,
    entity: str,
    data_file: str | None,
    assignments: tuple[str, ...],
    tags: tuple[str, ...],
    categories: tuple[str, ...],
    attachments: tuple[str, ...],
    status: str | None,
) -> None:
    """Validate a submission and store it as a new record."""
    svc = _service(app, entity, "create_record")
    submitted = _collect_submission(
        data_file,
        assignments,
        tags=tags,
        categories=categories,
        attachments=attachments,
        status=status,
    )
    app.emit(svc.create(submitted))


@record.command(
    examples="""\
  pressctl record update post 1 --set title="New SEO title"
  pressctl record update post 1 --tag a --tag b
  pressctl record update post 1 --status publish"""
)
@click.argument("entity")
@click.argument("record_id", type=int)
@_submission_options
@click.pass_obj
def update(
    app: AppContext,
    entity: str,
    record_id: int,
    data_file: str | None,
    assignments: tuple[str, ...],
    tags: tuple[str, ...],
    categories: tuple[str, ...],
    attachments: tuple[str, ...],
    status: str | None,
) -> None:
    """Apply a submission to an existing record.

    Tags, categories and attachments given here replace the stored sets.
    """
    svc = _service(app, entity, "update_record")
    submitted = _collect_submission(
        data_file,
        assignments,
        tags=tags,
        categories=categories,
        attachments=attachments,
        status=status,
    )
    app.emit(svc.update(record_id, submitted))


@record.command(examples="  pressctl --json record get post 1")
@click.argument("entity")
@click.argument("record_id", type=int)
@click.pass_obj
def get(app: AppContext, entity: str, record_id: int) -> None:
    """Show one record."""
    app.emit(_service(app, entity, "get_record").get(record_id))


@record.command(
    examples="""\
  pressctl record edit post
  pressctl -v record edit post 1"""
)
@click.argument("entity")
@click.argument("record_id", type=int, required=False)
@click.pass_obj
def edit(app: AppContext, entity: str, record_id: int | None) -> None:
    """Show the editor form state (blank form when no id is given)."""
    app.emit(_service(app, entity, "edit_form").edit_form(record_id))


@record.command(
    name="list",
    examples="""\
  pressctl record list post
  pressctl record list post --status draft --search festival
  pressctl record list post --created-from 2026-01-01 --created-to 2026-01-31
  pressctl record list post --sort -publish_at --limit 5 --offset 5""",
)
@click.argument("entity")
@click.option("--status", default=None, help="Filter by status.")
@click.option("--search", default=None, help="Free-text search.")
@click.option("--created-from", default=None, help="Created on or after (YYYY-MM-DD).")
@click.option("--created-to", default=None, help="Created on or before (YYYY-MM-DD).")
@click.option("--sort", default=None, help="Sortable column; prefix '-' for descending.")
@click.option("--limit", default=None, type=int, help="Max rows.")
@click.option("--offset", default=0, type=int, help="Rows to skip.")
@click.pass_obj
def list_cmd(
    app: AppContext,
    entity: str,
    status: str | None,
    search: str | None,
    created_from: str | None,
    created_to: str | None,
    sort: str | None,
    limit: int | None,
    offset: int,
) -> None:
    """List records through the entity's columns."""
    svc = _service(app, entity, "list_records")
    app.emit(
        svc.list(
            {
                "status": status,
                "search": search,
                "created_from": created_from,
                "created_to": created_to,
                "sort": sort,
                "limit": limit,
                "offset": offset,
            }
        )
    )
