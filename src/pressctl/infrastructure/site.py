"""Site — the single dependency injected into every service.

The Site owns the database engine and the schema registry built from
settings.  The :meth:`transaction` context manager wraps SQLAlchemy's
``engine.begin()``: every write in the block commits together or rolls
back together.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select, update

from pressctl.domain.errors import RecordConflictError
from pressctl.domain.registry import SchemaRegistry
from pressctl.domain.schema import RECORD_ATTRIBUTES, Schema
from pressctl.domain.types import SyncMode
from pressctl.entities import register_builtin_schemas
from pressctl.infrastructure.database.engine import init_database
from pressctl.infrastructure.database.schema import (
    categories,
    comments,
    record_associations,
    records,
)
from pressctl.infrastructure.repositories.records import (
    field_expr,
    load_associations,
    row_to_comment,
    row_to_record,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from pressctl.config.settings import PressSettings
    from pressctl.domain.records import Comment, Record

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Current UTC time as ISO 8601."""
    return datetime.now(UTC).isoformat(timespec="seconds")


# ---------------------------------------------------------------------------
# SiteTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class SiteTransaction:
    """Active transaction context with the DB connection and write helpers."""

    conn: Connection

    # ------------------------------------------------------------------
    # Uniqueness lookup (validation collaborator)
    # ------------------------------------------------------------------

    def exists(
        self,
        table: str,
        field: str,
        value: Any,
        *,
        exclude_id: int | None = None,
    ) -> bool:
        """True when a record of entity *table* already has *field* == *value*.

        Ids are shared by every entity, so an ``id`` lookup ignores *table*.
        """
        expr = field_expr(field)
        if field == "id":
            try:
                value = int(value)
            except (TypeError, ValueError):
                return False
            stmt = select(records.c.id).where(expr == value)
        else:
            stmt = select(records.c.id).where(records.c.entity == table, expr == value)
        if exclude_id is not None:
            stmt = stmt.where(records.c.id != exclude_id)
        return self.conn.execute(stmt.limit(1)).first() is not None

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def load_record(self, entity: str, record_id: int) -> Record | None:
        row = (
            self.conn.execute(
                select(records).where(records.c.entity == entity, records.c.id == record_id)
            )
            .mappings()
            .first()
        )
        if row is None:
            return None
        return row_to_record(row, load_associations(self.conn, [record_id])[record_id])

    def write_record(self, record: Record, *, new: bool | None = None) -> Record:
        """Insert a new record or update an existing one in place.

        *new* defaults to ``record.is_new``.  A new record with an explicit
        id is inserted under that id; an existing record is only updated
        when the stored row belongs to the same entity, otherwise
        :class:`RecordConflictError` is raised.  Sets ``id`` and timestamps
        on *record* and returns it.
        """
        if new is None:
            new = record.is_new
        now = now_iso()
        values = {
            "entity": record.entity,
            "status": str(record.status),
            "content": json.dumps(record.content, ensure_ascii=False, default=str),
            "publish_at": record.publish_at,
            "updated_at": now,
        }
        if new:
            values["created_at"] = record.created_at or now
            if record.id is not None:
                values["id"] = record.id
            result = self.conn.execute(insert(records).values(**values))
            record.id = int(result.inserted_primary_key[0])
            record.created_at = values["created_at"]
        else:
            result = self.conn.execute(
                update(records)
                .where(records.c.id == record.id, records.c.entity == record.entity)
                .values(**values)
            )
            if result.rowcount == 0:
                raise RecordConflictError(record.entity, record.id)
        record.updated_at = now
        return record

    def sync_association(
        self,
        record_id: int,
        name: str,
        members: Iterable[Any],
        *,
        mode: SyncMode = SyncMode.REPLACE,
    ) -> set[str]:
        """Make association *name* of *record_id* match *members*.

        ``REPLACE`` drops members not in *members*; ``ATTACH`` only adds.
        Returns the resulting member set.
        """
        wanted = {str(m) for m in members}
        where = (
            record_associations.c.record_id == record_id,
            record_associations.c.name == name,
        )
        current = {
            str(row.member)
            for row in self.conn.execute(select(record_associations.c.member).where(*where))
        }

        if mode is SyncMode.REPLACE:
            stale = current - wanted
            if stale:
                self.conn.execute(
                    delete(record_associations).where(
                        *where, record_associations.c.member.in_(stale)
                    )
                )
            result = wanted
        else:
            result = current | wanted

        for member in sorted(wanted - current):
            self.conn.execute(
                insert(record_associations).values(record_id=record_id, name=name, member=member)
            )
        logger.debug("Synced %s for record %s: %d member(s)", name, record_id, len(result))
        return result

    def save(self, schema: Schema, record: Record, validated: dict[str, Any]) -> Record:
        """Apply *validated* data to *record*, write it, and sync associations.

        Association keys absent from *validated* are left untouched; a
        present key (even an empty list) syncs that association.
        """
        assoc_names = set(schema.association_names())
        new = record.is_new
        for key, value in validated.items():
            if key in assoc_names:
                continue
            if key == "id":
                if record.id is None and value not in (None, ""):
                    record.id = int(value)
            elif key in RECORD_ATTRIBUTES:
                if key in ("status", "publish_at"):
                    setattr(record, key, value)
            else:
                record.content[key] = value

        self.write_record(record, new=new)
        assert record.id is not None

        for spec in schema.associations:
            if spec.name in validated:
                record.associations[spec.name] = self.sync_association(
                    record.id, spec.name, validated[spec.name], mode=spec.mode
                )
        return record

    # ------------------------------------------------------------------
    # Categories and comments
    # ------------------------------------------------------------------

    def add_category(self, name: str, slug: str) -> int:
        result = self.conn.execute(
            insert(categories).values(name=name, slug=slug, created_at=now_iso())
        )
        return int(result.inserted_primary_key[0])

    def add_comment(
        self,
        content: str,
        *,
        post_id: int | None = None,
        user_id: int | None = None,
        approved: bool = False,
    ) -> Comment:
        now = now_iso()
        result = self.conn.execute(
            insert(comments).values(
                post_id=post_id,
                user_id=user_id,
                content=content,
                approved=int(approved),
                created_at=now,
                updated_at=now,
            )
        )
        comment_id = int(result.inserted_primary_key[0])
        comment = self.load_comment(comment_id)
        assert comment is not None
        return comment

    def load_comment(self, comment_id: int) -> Comment | None:
        row = (
            self.conn.execute(select(comments).where(comments.c.id == comment_id))
            .mappings()
            .first()
        )
        return row_to_comment(row) if row is not None else None

    def set_comment_approval(self, comment_id: int, approved: bool) -> Comment | None:
        self.conn.execute(
            update(comments)
            .where(comments.c.id == comment_id)
            .values(approved=int(approved), updated_at=now_iso())
        )
        return self.load_comment(comment_id)


# ---------------------------------------------------------------------------
# Site
# ---------------------------------------------------------------------------


class Site:
    """Database engine plus the frozen schema registry for one site."""

    def __init__(self, settings: PressSettings) -> None:
        self.settings = settings
        self._root = settings.site_root
        self._engine = init_database(self._root)
        self._registry: SchemaRegistry | None = None

    @property
    def root(self) -> Path:
        return self._root

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def registry(self) -> SchemaRegistry:
        """Registry of built-in entities, frozen on first access."""
        if self._registry is None:
            registry = SchemaRegistry()
            register_builtin_schemas(
                registry,
                routes=self.settings.routes.patterns,
                excerpt_length=self.settings.listing.excerpt_length,
            )
            registry.freeze()
            self._registry = registry
        return self._registry

    @contextmanager
    def transaction(self) -> Iterator[SiteTransaction]:
        """Run a block inside one database transaction."""
        with self._engine.begin() as conn:
            yield SiteTransaction(conn=conn)

    def close(self) -> None:
        self._engine.dispose()
