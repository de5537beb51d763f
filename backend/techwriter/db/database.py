"""Database setup — SQLite via SQLModel/SQLAlchemy, schema via Alembic.

Design decisions:
- One SQLModel table per collection (time blocks, projects, teams,
  active timers, preferences, weekly summaries)
- SQLite WAL mode for file databases; a single shared connection
  (StaticPool) for ``sqlite:///:memory:`` so every session sees the same data
- Schema versions are Alembic revisions, applied up to head when the
  store is opened. Older on-disk schemas upgrade in place without
  losing rows.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from techwriter.exceptions import StorageUnavailable

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"

MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def prepare_database_url(url: str) -> str:
    """Ensure the data directory of a SQLite file URL exists."""
    if url.startswith("sqlite:///") and url not in MEMORY_URLS:
        db_path = url.replace("sqlite:///", "")
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    return url


def _set_sqlite_wal(dbapi_connection, connection_record):
    """Enable WAL mode for file-backed SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")  # Safe with WAL
    cursor.execute("PRAGMA busy_timeout=5000")    # 5s wait on lock
    cursor.close()


def build_engine(url: str) -> Engine:
    """Create an engine for ``url``. SQLite file databases get WAL pragmas."""
    url = prepare_database_url(url)
    if url in MEMORY_URLS:
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    engine = create_engine(
        url,
        echo=False,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {},
    )
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _set_sqlite_wal)
    return engine


def alembic_config() -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    return cfg


def apply_migrations(engine: Engine, revision: str = "head") -> None:
    """Upgrade the schema to ``revision`` on the engine's database."""
    cfg = alembic_config()
    with engine.begin() as connection:
        cfg.attributes["connection"] = connection
        command.upgrade(cfg, revision)


def current_revision(engine: Engine) -> str | None:
    with engine.connect() as connection:
        return MigrationContext.configure(connection).get_current_revision()


def open_engine(url: str) -> Engine:
    """Create the engine and bring its schema up to date.

    Raises:
        StorageUnavailable: If the database cannot be opened or migrated.
    """
    try:
        engine = build_engine(url)
        apply_migrations(engine)
    except (SQLAlchemyError, OSError) as e:
        raise StorageUnavailable(f"Cannot open database {url}: {e}") from e

    logger.info("Database ready at %s (schema %s)", url, current_revision(engine))
    return engine
