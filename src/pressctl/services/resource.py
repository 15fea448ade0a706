"""ResourceService — the generic admin engine for one entity schema.

Pipeline for writes: VALIDATE → SAVE (record + association sync) → RESPOND.
Pipeline for lists: FILTER/SORT/PAGE (repository) → PROJECT → RESPOND.

The service is parameterized by a :class:`Schema` value; there is one
engine for every entity rather than one subclass per entity.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from pressctl.domain.errors import ConstraintViolation, FieldError
from pressctl.domain.projection import Projection, project
from pressctl.domain.query import ListQuery
from pressctl.domain.records import Record
from pressctl.domain.types import FormSection, ListFilter
from pressctl.domain.validation import ValidationContext, ValidationResult, validate
from pressctl.infrastructure.repositories.records import RecordRepository
from pressctl.services.base import BaseService
from pressctl.services.result import ServiceResult, failure

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from pressctl.domain.schema import Schema
    from pressctl.infrastructure.site import Site, SiteTransaction


def _error_result(op: str, vr: ValidationResult) -> ServiceResult:
    violations = [e for e in vr.errors if isinstance(e, ConstraintViolation)]
    code = "CONSTRAINT_VIOLATION" if violations else "VALIDATION_FAILED"
    message = "; ".join(f"{e.field}: {e.message or e.rule}" for e in vr.errors)
    return failure(op, code, message, errors=[_error_dict(e) for e in vr.errors])


def _error_dict(error: FieldError) -> dict[str, Any]:
    return {"field": error.field, "rule": error.rule, "message": error.message}


class ResourceService(BaseService):
    """Validate, save, load and list records of one entity."""

    def __init__(self, site: Site, schema: Schema) -> None:
        super().__init__(site)
        self._schema = schema
        self._repo = RecordRepository(site.engine)

    @classmethod
    def for_entity(cls, site: Site, entity: str) -> ResourceService:
        """Build the engine for a registered entity.

        Raises:
            UnknownSchemaError: *entity* is not registered.
        """
        return cls(site, site.registry.get_schema(entity))

    @property
    def schema(self) -> Schema:
        return self._schema

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def validate(
        self,
        submitted: Mapping[str, Any],
        txn: SiteTransaction,
        *,
        record_id: int | None = None,
    ) -> ValidationResult:
        """Validate *submitted* with *txn* as the uniqueness lookup."""
        return validate(
            self._schema,
            submitted,
            ValidationContext(lookup=txn, record_id=record_id),
        )

    def save(
        self,
        record: Record,
        validated: dict[str, Any],
        *,
        txn: SiteTransaction | None = None,
    ) -> Record:
        """Write *record* with *validated* data and sync its associations.

        Declared associations present in *validated* replace the stored
        membership (or extend it, for ``attach`` associations).
        """
        if txn is not None:
            return txn.save(self._schema, record, validated)
        with self._site.transaction() as own:
            return own.save(self._schema, record, validated)

    def create(self, submitted: Mapping[str, Any]) -> ServiceResult:
        """Validate *submitted* and store it as a new record."""
        op = "create_record"
        with self._site.transaction() as txn:
            vr = self.validate(submitted, txn)
            if not vr.ok:
                return _error_result(op, vr)
            record = self.save(Record(entity=self._schema.entity), vr.data, txn=txn)
        return ServiceResult(ok=True, op=op, data=record.to_dict())

    def update(self, record_id: int, submitted: Mapping[str, Any]) -> ServiceResult:
        """Validate *submitted* and apply it to an existing record.

        The submission is overlaid on the stored content before
        validation, so only changed fields need to be sent.  Associations
        missing from *submitted* keep their members.
        """
        op = "update_record"
        with self._site.transaction() as txn:
            record = txn.load_record(self._schema.entity, record_id)
            if record is None:
                return self._not_found(op, record_id)
            vr = self.validate({**record.content, **submitted}, txn, record_id=record_id)
            if not vr.ok:
                return _error_result(op, vr)
            changed = sorted(key for key in vr.data if key in submitted)
            self.save(record, vr.data, txn=txn)
        data = record.to_dict()
        data["fields_changed"] = changed
        return ServiceResult(ok=True, op=op, data=data)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, record_id: int) -> ServiceResult:
        op = "get_record"
        record = self._repo.get_record(self._schema.entity, record_id)
        if record is None:
            return self._not_found(op, record_id)
        return ServiceResult(ok=True, op=op, data=record.to_dict())

    def edit_form(self, record_id: int | None = None) -> ServiceResult:
        """Form state for the editor: field values grouped by section.

        Association fields are filled with the stored member ids, and
        select options backed by a source (``categories``) are loaded.
        """
        op = "edit_form"
        record = Record(entity=self._schema.entity)
        if record_id is not None:
            loaded = self._repo.get_record(self._schema.entity, record_id)
            if loaded is None:
                return self._not_found(op, record_id)
            record = loaded

        assoc_names = set(self._schema.association_names())
        sections: dict[str, list[dict[str, Any]]] = {str(s): [] for s in FormSection}
        for spec in self._schema.fields:
            if spec.name in assoc_names:
                value: Any = record.members(spec.name)
            else:
                value = record.content.get(spec.name)
            entry: dict[str, Any] = {
                "name": spec.name,
                "kind": str(spec.kind),
                "title": spec.title,
                "required": spec.required,
                "value": value,
            }
            if spec.group:
                entry["group"] = spec.group
            options = self._options_for(spec.options, spec.options_source)
            if options:
                entry["options"] = options
            sections[str(spec.section)].append(entry)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "entity": self._schema.entity,
                "id": record.id,
                "status": str(record.status),
                "sections": sections,
            },
        )

    def _options_for(self, static: Mapping[str, str], source: str | None) -> dict[str, str]:
        options = dict(static)
        if source == "categories":
            options.update(self._repo.list_categories())
        return options

    def project(self, records: Iterable[Any]) -> Projection:
        """Project *records* through this schema's columns."""
        return project(self._schema.columns, records)

    def list(self, query: ListQuery | Mapping[str, Any] | None = None) -> ServiceResult:
        """Filtered, sorted, paginated list view of the entity."""
        op = "list_records"
        listing = self._site.settings.listing
        if query is None:
            query = ListQuery(limit=listing.default_limit)
        elif not isinstance(query, ListQuery):
            params = {k: v for k, v in query.items() if v is not None}
            params.setdefault("limit", listing.default_limit)
            try:
                query = ListQuery.model_validate(params)
            except ValidationError as exc:
                return failure(op, "INVALID_QUERY", str(exc))

        problem = self._check_query(query)
        if problem is not None:
            return failure(op, "INVALID_QUERY", problem)
        if query.limit > listing.max_limit:
            query = query.model_copy(update={"limit": listing.max_limit})

        sort_path: str | None = None
        if query.sort_column is not None:
            column = self._schema.column(query.sort_column)
            assert column is not None
            sort_path = column.path

        records = self._repo.list_records(self._schema.entity, query, sort_path=sort_path)
        total = self._repo.count_records(self._schema.entity, query)
        rows = self.project(records)

        warnings = [
            f"Row {e.row}: column {e.column!r} failed to render: {e.message}"
            for e in rows.errors()
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "entity": self._schema.entity,
                "columns": _column_meta(self._schema),
                "items": rows.to_dicts(),
                "count": len(records),
                "total": total,
            },
            warnings=warnings,
            meta={"limit": query.limit, "offset": query.offset, "sort": query.sort},
        )

    def _check_query(self, query: ListQuery) -> str | None:
        enabled = set(self._schema.filters)
        requested = {
            ListFilter.STATUS: query.status is not None,
            ListFilter.SEARCH: query.search is not None,
            ListFilter.CREATED: query.created_from is not None or query.created_to is not None,
        }
        for name, used in requested.items():
            if used and name not in enabled:
                return f"Filter {str(name)!r} is not enabled for {self._schema.entity!r}"
        column = query.sort_column
        if column is not None and column not in self._schema.sortable_columns():
            allowed = ", ".join(self._schema.sortable_columns()) or "none"
            return f"Column {column!r} is not sortable (sortable: {allowed})"
        return None

    def _not_found(self, op: str, record_id: int) -> ServiceResult:
        return failure(
            op,
            "NOT_FOUND",
            f"No {self._schema.entity} found with ID: {record_id}",
        )


def _column_meta(schema: Schema) -> list[dict[str, Any]]:
    return [
        {
            "name": c.name,
            "label": c.display_label,
            "align": str(c.align),
            "width": c.width,
            "sortable": c.sortable,
            "filter": str(c.filter) if c.filter else None,
        }
        for c in schema.columns
    ]
