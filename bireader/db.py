"""SQLAlchemy database setup for Bilingual Reader."""

import os
from pathlib import Path
from typing import Final

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from bireader.utils import get_app_data_path

#: The default database name.
DEFAULT_DB_NAME: Final[str] = "history.db"
#: Environment variable overriding the database file.
DB_PATH_ENV: Final[str] = "BIREADER_DB_PATH"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


def get_db_path() -> Path:
    """
    Get the path to the history database.

    - If ``BIREADER_DB_PATH`` is set, use it.
    - Otherwise use ``history.db`` inside the application data directory.

    Returns:
        Path to the database file

    """
    override = os.environ.get(DB_PATH_ENV)
    if override:
        return Path(override)
    return get_app_data_path() / DEFAULT_DB_NAME


def create_engine_with_path(db_path: Path | None = None) -> Engine:
    """
    Create SQLAlchemy engine with proper SQLite settings.

    Args:
        db_path: Optional path to database file. If None, uses default path.

    Returns:
        SQLAlchemy engine

    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)
    db_path.touch(exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        echo=False,  # Set to True for SQL debugging
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):  # noqa: ARG001
        """Set SQLite pragmas on connection."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


_engine: Engine | None = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def get_engine() -> Engine:
    """
    Get (and lazily create) the default engine.

    Returns:
        SQLAlchemy engine bound to :func:`get_db_path`

    """
    global _engine  # noqa: PLW0603
    if _engine is None:
        _engine = create_engine_with_path()
        SessionLocal.configure(bind=_engine)
    return _engine


def create_tables(engine: Engine | None = None) -> None:
    """
    Create any missing tables.

    Keyword Args:
        engine: Engine to use; defaults to :func:`get_engine`

    """
    # Import models so their tables are registered on the metadata
    import bireader.models  # noqa: F401, PLC0415

    Base.metadata.create_all(engine or get_engine())
