"""SQLAlchemy Core table definitions for the pressctl database.

Declared form fields are stored as one JSON document per record in
``records.content``; only attributes the list view filters or sorts on
natively get their own columns.
"""

from __future__ import annotations

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Table,
    Text,
    UniqueConstraint,
)

metadata = MetaData()

records = Table(
    "records",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("entity", Text, nullable=False),
    Column("status", Text, nullable=False, default="draft", server_default="draft"),
    Column("content", Text, nullable=False, default="{}", server_default="{}"),  # JSON object
    Column("publish_at", Text),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

record_associations = Table(
    "record_associations",
    metadata,
    Column("record_id", Integer, ForeignKey("records.id", ondelete="CASCADE"), nullable=False),
    Column("name", Text, nullable=False),  # tags | category | attachment
    Column("member", Text, nullable=False),
    UniqueConstraint("record_id", "name", "member"),
)

categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", Text, nullable=False),
    Column("slug", Text, nullable=False, unique=True),
    Column("created_at", Text, nullable=False),
)

comments = Table(
    "comments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("post_id", Integer, ForeignKey("records.id", ondelete="SET NULL")),
    Column("user_id", Integer),
    Column("content", Text, nullable=False),
    Column("approved", Integer, nullable=False, default=0, server_default="0"),
    Column("created_at", Text, nullable=False),
    Column("updated_at", Text, nullable=False),
)

# ---------------------------------------------------------------------------
# Indexes for frequently filtered columns
# ---------------------------------------------------------------------------

Index("ix_records_entity", records.c.entity)
Index("ix_records_status", records.c.status)
Index("ix_records_created_at", records.c.created_at)
Index("ix_record_associations_record", record_associations.c.record_id, record_associations.c.name)
Index("ix_comments_post", comments.c.post_id)
