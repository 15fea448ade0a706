"""Command group: categories offered by the post category select."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pressctl.commands._base import PressGroup
from pressctl.services.taxonomy import CategoryService

if TYPE_CHECKING:
    from pressctl.commands._context import AppContext


@click.group(cls=PressGroup, examples="  pressctl category add News\n  pressctl category list")
@click.pass_obj
def category(app: AppContext) -> None:
    """Manage categories."""


@category.command()
@click.argument("name")
@click.option("--slug", default=None, help="Explicit slug (derived from name by default).")
@click.pass_obj
def add(app: AppContext, name: str, slug: str | None) -> None:
    """Add a category."""
    app.emit(CategoryService(app.site).add(name, slug=slug))


@category.command(name="list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List categories."""
    app.emit(CategoryService(app.site).list())
