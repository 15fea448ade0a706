"""Command group: inspect registered entity schemas."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pressctl.commands._base import PressGroup
from pressctl.services.schemas import SchemaService

if TYPE_CHECKING:
    from pressctl.commands._context import AppContext


@click.group(cls=PressGroup, examples="  pressctl schema list\n  pressctl -v schema show post")
@click.pass_obj
def schema(app: AppContext) -> None:
    """Inspect entity schemas."""


@schema.command(name="list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List registered entities."""
    app.emit(SchemaService(app.site).list())


@schema.command()
@click.argument("entity")
@click.pass_obj
def show(app: AppContext, entity: str) -> None:
    """Show an entity's fields, columns and rules."""
    app.emit(SchemaService(app.site).show(entity))
