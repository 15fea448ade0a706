"""SchemaService — read-only introspection of the registered entities."""

from __future__ import annotations

from typing import Any

from pressctl.domain.errors import UnknownSchemaError
from pressctl.domain.schema import Schema
from pressctl.services.base import BaseService
from pressctl.services.result import ServiceResult, failure


def describe_schema(schema: Schema) -> dict[str, Any]:
    """JSON-ready description of *schema* (render functions omitted)."""
    return {
        "entity": schema.entity,
        "name": schema.name,
        "description": schema.description,
        "title": schema.title,
        "slug_field": schema.slug_field,
        "fields": [
            {
                "name": f.name,
                "kind": str(f.kind),
                "section": str(f.section),
                "group": f.group,
                "required": f.required,
                "max_length": f.max_length,
                "title": f.title,
                "help": f.help,
            }
            for f in schema.fields
        ],
        "columns": [
            {
                "name": c.name,
                "label": c.display_label,
                "align": str(c.align),
                "sortable": c.sortable,
                "filter": str(c.filter) if c.filter else None,
                "rendered": c.render is not None,
            }
            for c in schema.columns
        ],
        "rules": [f"{r.field}: {r.describe()}" for r in schema.rules],
        "filters": [str(f) for f in schema.filters],
        "associations": {a.name: str(a.mode) for a in schema.associations},
    }


class SchemaService(BaseService):
    def list(self) -> ServiceResult:
        items = [
            {"id": s.entity, "name": s.name, "fields": len(s.fields), "columns": len(s.columns)}
            for s in self._site.registry
        ]
        return ServiceResult(ok=True, op="list_schemas", data={"items": items, "count": len(items)})

    def show(self, entity: str) -> ServiceResult:
        try:
            schema = self._site.registry.get_schema(entity)
        except UnknownSchemaError as exc:
            return failure("show_schema", "UNKNOWN_ENTITY", str(exc))
        return ServiceResult(ok=True, op="show_schema", data=describe_schema(schema))
