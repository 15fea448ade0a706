"""SQLite database engine and schema via SQLAlchemy Core."""

from pressctl.infrastructure.database.engine import create_db_engine, init_database
from pressctl.infrastructure.database.schema import (
    categories,
    comments,
    metadata,
    record_associations,
    records,
)

__all__ = [
    "categories",
    "comments",
    "create_db_engine",
    "init_database",
    "metadata",
    "record_associations",
    "records",
]
