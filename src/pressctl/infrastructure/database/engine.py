"""Database engine setup for SQLite with WAL mode.

The DB is stored at {site_root}/.pressctl/pressctl.db.  SQLAlchemy Core
(not ORM) is used: each CLI invocation is a short-lived process and the
engine works with plain rows.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from pressctl.infrastructure.database.schema import metadata

DATA_DIRNAME = ".pressctl"
DB_FILENAME = "pressctl.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode and foreign keys enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


def init_database(site_root: Path) -> Engine:
    """Initialize the pressctl database at ``{site_root}/.pressctl/pressctl.db``.

    Creates the ``.pressctl/`` directory and all tables from
    :data:`schema.metadata`.  Idempotent — safe to call on an existing site.

    Returns the engine ready for use.
    """
    data_dir = site_root / DATA_DIRNAME
    data_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(data_dir / DB_FILENAME)
    metadata.create_all(engine)
    return engine
