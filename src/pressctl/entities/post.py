"""Post — the demonstrative article entity.

Editor layout: the ``fields`` area carries the article content, ``main``
carries taxonomy and attachments, ``options`` carries the sidebar
metadata.  Categories, tags and attachments are associations synced on
every save.
"""

from __future__ import annotations

from typing import Any

from pressctl.domain.columns import ColumnSpec
from pressctl.domain.fields import FieldSpec, flatten_fields, group, in_section
from pressctl.domain.rules import parse_rules
from pressctl.domain.schema import AssociationSpec, Schema, build_schema
from pressctl.domain.types import Align, FieldKind, FilterKind, FormSection, ListFilter
from pressctl.entities.routes import RouteTable

ENTITY = "post"

WITHOUT_CATEGORY = {"0": "Without category"}


def _fields() -> tuple[FieldSpec, ...]:
    return flatten_fields(
        group(
            "headline",
            FieldSpec(
                name="name",
                max_length=255,
                required=True,
                title="Name Articles",
                help="Article title",
            ),
            FieldSpec(
                name="title",
                max_length=255,
                required=True,
                title="Article Title",
                help="SEO title",
            ),
        ),
        group(
            "event",
            FieldSpec(
                name="open",
                kind=FieldKind.DATE,
                title="Opening date",
                help="The opening event will take place",
            ),
            FieldSpec(name="phone", mask="(999) 999-9999", title="Phone", help="Number Phone"),
            FieldSpec(
                name="free",
                kind=FieldKind.CHECKBOX,
                title="Free",
                placeholder="Event for free",
                help="Event for free",
            ),
        ),
        FieldSpec(
            name="body",
            kind=FieldKind.RICHTEXT,
            required=True,
            title="Name Articles",
            help="Article title",
        ),
        FieldSpec(
            name="place",
            kind=FieldKind.MAP,
            required=True,
            title="Object on the map",
            help="Enter the coordinates, or use the search",
        ),
        FieldSpec(name="picture", kind=FieldKind.IMAGE, attributes={"width": 500, "height": 300}),
        FieldSpec(name="link", kind=FieldKind.URL, title="UTM link", help="Generated link"),
        FieldSpec(
            name="body2", kind=FieldKind.MARKDOWN, title="Name Articles", help="Article title"
        ),
        FieldSpec(
            name="body3",
            kind=FieldKind.RICHTEXT,
            title="Name Articles",
            help="Article title",
            attributes={"editor": "quill"},
        ),
        FieldSpec(name="code", kind=FieldKind.CODE, title="Name Articles", help="Article title"),
        in_section(
            FormSection.MAIN,
            FieldSpec(
                name="category.",
                kind=FieldKind.SELECT,
                multiple=True,
                options=WITHOUT_CATEGORY,
                options_source="categories",
                title="Category",
                help="Select category",
            ),
            FieldSpec(name="tags", kind=FieldKind.TAGS, title="Tags", help="Keywords"),
            FieldSpec(name="attachment", kind=FieldKind.UPLOAD, title="Upload DropBox"),
        ),
        in_section(
            FormSection.OPTIONS,
            FieldSpec(
                name="description",
                kind=FieldKind.TEXTAREA,
                max_length=255,
                required=True,
                title="Short description",
                attributes={"rows": 5},
            ),
        ),
    )


def _date_only(value: Any) -> str | None:
    if not value:
        return None
    return str(value)[:10]


def _columns(routes: RouteTable) -> tuple[ColumnSpec, ...]:
    def view_link(record: Any) -> str:
        url = routes.url("records.view", entity=ENTITY, id=record.id)
        return f"{record.id} View <{url}>"

    return (
        ColumnSpec(
            name="id",
            label="ID",
            align=Align.CENTER,
            width="100px",
            filter=FilterKind.NUMERIC,
            sortable=True,
            render=view_link,
        ),
        ColumnSpec(
            name="name",
            label="Name",
            width="250px",
            accessor="content.name",
            filter=FilterKind.TEXT,
            sortable=True,
        ),
        ColumnSpec(name="status", sortable=True),
        ColumnSpec(
            name="phone", label="Phone", accessor="content.phone", filter=FilterKind.TEXT
        ),
        ColumnSpec(
            name="publish_at",
            label="Date of publication",
            filter=FilterKind.DATE,
            sortable=True,
            align=Align.RIGHT,
            render=lambda record: _date_only(record.publish_at),
        ),
        ColumnSpec(
            name="created_at",
            label="Date of creation",
            filter=FilterKind.DATE,
            align=Align.RIGHT,
            sortable=True,
            render=lambda record: _date_only(record.created_at),
        ),
    )


RULES = parse_rules(
    {
        "id": "sometimes|integer|unique:post",
        "name": "required|string",
        "body": "required|string",
    }
)


def build_post_schema(routes: RouteTable | None = None) -> Schema:
    """Build the ``post`` schema with links resolved through *routes*."""
    return build_schema(
        ENTITY,
        fields=_fields(),
        columns=_columns(routes or RouteTable()),
        rules=RULES,
        name="Example post",
        description="Demonstrative post",
        title="Common Posts",
        slug_field="name",
        filters=(ListFilter.STATUS, ListFilter.SEARCH, ListFilter.CREATED),
        associations=(
            AssociationSpec(name="category"),
            AssociationSpec(name="tags"),
            AssociationSpec(name="attachment"),
        ),
    )
