"""
Database connection management for the SQL storage backend.

Uses SQLAlchemy for ORM operations. Supports PostgreSQL and SQLite.
Only used when STORAGE_BACKEND is "sql"; the default backend is the flat
JSON record file.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def create_db_engine(database_url: str) -> Engine:
    """
    Build an engine for ``database_url``.

    SQLite does not support pool_size, max_overflow, or pool_pre_ping, and
    needs check_same_thread=False because FastAPI runs sync routes in a
    thread pool.
    """
    engine_kwargs = {"echo": False}

    if database_url.startswith("postgresql"):
        engine_kwargs.update({
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        })
    elif database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}

    engine = create_engine(database_url, **engine_kwargs)

    # WAL mode lets readers proceed while a registration is being written
    if database_url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine: Engine):
    """Create all tables that do not exist yet."""
    # Register models with Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
