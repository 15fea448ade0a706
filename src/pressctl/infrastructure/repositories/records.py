"""Read-oriented repositories for list views and edit forms."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any

from sqlalchemy import Connection, Text, cast, func, or_, select
from sqlalchemy.engine import Engine
from sqlalchemy.sql.elements import ColumnElement

from pressctl.domain.query import ListQuery
from pressctl.domain.records import Comment, Record
from pressctl.infrastructure.database.schema import (
    categories,
    comments,
    record_associations,
    records,
)

# Record attributes backed by a real column; everything else lives in JSON content.
NATIVE_COLUMNS: dict[str, ColumnElement[Any]] = {
    "id": records.c.id,
    "status": records.c.status,
    "publish_at": records.c.publish_at,
    "created_at": records.c.created_at,
    "updated_at": records.c.updated_at,
}


def content_expr(path: str) -> ColumnElement[Any]:
    """SQL expression reading *path* from the JSON content column.

    A leading ``content.`` segment is dropped, so column accessors can be
    passed as-is.
    """
    if path.startswith("content."):
        path = path[len("content.") :]
    return func.json_extract(records.c.content, f"$.{path}")


def field_expr(path: str) -> ColumnElement[Any]:
    """Native column for record attributes, JSON extraction otherwise."""
    native = NATIVE_COLUMNS.get(path)
    return native if native is not None else content_expr(path)


def like_pattern(text: str) -> str:
    """``%text%`` with LIKE wildcards in *text* escaped by backslash."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _content_value_matches(term: str) -> ColumnElement[bool]:
    """EXISTS over the scalar values of the content document (keys excluded)."""
    tree = func.json_tree(records.c.content).table_valued("atom", "type", name="tree")
    return (
        select(tree.c.atom)
        .where(
            tree.c.type.in_(("text", "integer", "real")),
            func.lower(cast(tree.c.atom, Text)).like(term, escape="\\"),
        )
        .correlate(records)
        .exists()
    )


def load_associations(
    conn: Connection, record_ids: Iterable[int]
) -> dict[int, dict[str, set[str]]]:
    """Fetch association members for *record_ids*, grouped by record and name."""
    ids = list(record_ids)
    grouped: dict[int, dict[str, set[str]]] = {rid: {} for rid in ids}
    if not ids:
        return grouped
    rows = conn.execute(
        select(
            record_associations.c.record_id,
            record_associations.c.name,
            record_associations.c.member,
        ).where(record_associations.c.record_id.in_(ids))
    ).fetchall()
    for row in rows:
        grouped[int(row.record_id)].setdefault(str(row.name), set()).add(str(row.member))
    return grouped


def row_to_record(
    row: Mapping[str, Any], associations: dict[str, set[str]] | None = None
) -> Record:
    """Build a :class:`Record` from a ``records`` row mapping."""
    return Record(
        id=int(row["id"]),
        entity=str(row["entity"]),
        status=str(row["status"]),
        content=json.loads(row["content"] or "{}"),
        associations=associations or {},
        publish_at=row["publish_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class RecordRepository:
    """Encapsulates SQL for record reads and list-view queries."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def get_record(self, entity: str, record_id: int) -> Record | None:
        """Fetch one record with its associations loaded."""
        stmt = select(records).where(records.c.entity == entity, records.c.id == record_id)
        with self._engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
            if row is None:
                return None
            assoc = load_associations(conn, [record_id])
        return row_to_record(row, assoc.get(record_id))

    def _filtered(self, entity: str, query: ListQuery) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = [records.c.entity == entity]
        if query.status:
            conditions.append(records.c.status == query.status)
        if query.search:
            term = like_pattern(query.search.lower())
            conditions.append(
                or_(
                    _content_value_matches(term),
                    cast(records.c.id, Text).like(term, escape="\\"),
                )
            )
        if query.created_from:
            conditions.append(records.c.created_at >= query.created_from.isoformat())
        if query.created_to:
            upper = query.created_to + timedelta(days=1)
            conditions.append(records.c.created_at < upper.isoformat())
        return conditions

    def count_records(self, entity: str, query: ListQuery | None = None) -> int:
        """Count records of *entity* matching the query filters."""
        conditions = self._filtered(entity, query or ListQuery())
        stmt = select(func.count(records.c.id)).where(*conditions)
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)

    def list_records(
        self,
        entity: str,
        query: ListQuery,
        *,
        sort_path: str | None = None,
    ) -> list[Record]:
        """Return one page of records, filtered and ordered by *query*.

        *sort_path* is the accessor path of the sort column; callers
        resolve it from the schema so arbitrary SQL never reaches here.
        Ties and unsorted pages fall back to id order.
        """
        stmt = select(records).where(*self._filtered(entity, query))
        if sort_path is not None:
            expr = field_expr(sort_path)
            stmt = stmt.order_by(expr.desc() if query.descending else expr.asc())
        stmt = stmt.order_by(records.c.id.asc()).limit(query.limit).offset(query.offset)

        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
            assoc = load_associations(conn, [int(r["id"]) for r in rows])
        return [row_to_record(r, assoc.get(int(r["id"]))) for r in rows]

    def list_categories(self) -> dict[str, str]:
        """Category id -> name, ordered by name."""
        stmt = select(categories.c.id, categories.c.name).order_by(categories.c.name)
        with self._engine.connect() as conn:
            rows = conn.execute(stmt).fetchall()
        return {str(row.id): str(row.name) for row in rows}


class CommentRepository:
    """Encapsulates SQL for the comment moderation list."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def list_comments(
        self,
        *,
        approved: bool | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Comment]:
        """Most recently edited comments first, each with its post loaded."""
        stmt = select(comments)
        if approved is not None:
            stmt = stmt.where(comments.c.approved == int(approved))
        stmt = (
            stmt.order_by(comments.c.updated_at.desc(), comments.c.id.desc())
            .limit(limit)
            .offset(offset)
        )

        with self._engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
            post_ids = {int(r["post_id"]) for r in rows if r["post_id"] is not None}
            posts: dict[int, Record] = {}
            if post_ids:
                post_rows = conn.execute(
                    select(records).where(records.c.id.in_(post_ids))
                ).mappings()
                posts = {int(p["id"]): row_to_record(p) for p in post_rows}

        return [
            row_to_comment(r, posts.get(int(r["post_id"])) if r["post_id"] is not None else None)
            for r in rows
        ]

    def count_comments(self, *, approved: bool | None = None) -> int:
        stmt = select(func.count(comments.c.id))
        if approved is not None:
            stmt = stmt.where(comments.c.approved == int(approved))
        with self._engine.connect() as conn:
            return int(conn.execute(stmt).scalar_one() or 0)


def row_to_comment(row: Mapping[str, Any], post: Record | None = None) -> Comment:
    return Comment(
        id=int(row["id"]),
        post_id=row["post_id"],
        user_id=row["user_id"],
        content=str(row["content"]),
        approved=bool(row["approved"]),
        post=post,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
