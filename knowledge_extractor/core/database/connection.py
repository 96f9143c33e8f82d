# File: knowledge_extractor/core/database/connection.py

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy_utils import database_exists, create_database

from knowledge_extractor.core.common.enums import StorageDialect
from knowledge_extractor.core.common.errors import PersistenceError
from knowledge_extractor.core.database.base import Base

logger = logging.getLogger(__name__)

POSTGRES_CONNECT_TIMEOUT_SEC = 5


@dataclass(frozen=True)
class DatabaseHandle:
    """
    The process-wide database resource.
    Constructed once by the entry point and passed to whoever needs it.
    """
    engine: Engine
    dialect: StorageDialect
    session_factory: sessionmaker

    def dispose(self) -> None:
        self.engine.dispose()


def create_db_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    # Heroku-style "postgres://" URLs name a dialect SQLAlchemy does not register
    backend, _, driver = url.drivername.partition("+")
    if backend == "postgres":
        url = url.set(drivername=f"postgresql+{driver}" if driver else "postgresql")

    # check_same_thread=False is needed only for SQLite (requests run on a threadpool)
    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False}
    else:
        connect_args = {"connect_timeout": POSTGRES_CONNECT_TIMEOUT_SEC}

    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args
    )


def _open(engine: Engine) -> DatabaseHandle:
    dialect = StorageDialect(engine.dialect.name)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    return DatabaseHandle(engine=engine, dialect=dialect, session_factory=factory)


def _ping(engine: Engine) -> None:
    # Simple query valid in both Postgres and SQLite
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def sqlite_url(sqlite_path: str) -> str:
    return f"sqlite:///{sqlite_path}"


def connect_embedded(sqlite_path: str) -> DatabaseHandle:
    """Opens (creating if needed) the file-backed SQLite database."""
    url = sqlite_url(sqlite_path)
    try:
        if not database_exists(url):
            create_database(url)
        engine = create_db_engine(url)
        _ping(engine)
    except SQLAlchemyError as e:
        raise PersistenceError(f"failed to open SQLite db at {sqlite_path}: {e}") from e

    logger.info(f"Using local SQLite DB at {sqlite_path}")
    return _open(engine)


def connect(database_url: Optional[str], sqlite_path: str) -> DatabaseHandle:
    """
    Graceful degradation:
    1. Try the networked database when a URL is configured (liveness-checked).
    2. Otherwise, or on any connection failure, provision the embedded SQLite file.
    """
    if database_url:
        engine = None
        try:
            engine = create_db_engine(database_url)
            _ping(engine)
        except (SQLAlchemyError, ValueError, ImportError) as e:
            logger.warning(f"Database connection test failed: {e}. Falling back to SQLite...")
            if engine is not None:
                engine.dispose()
        else:
            logger.info(f"Connected to {engine.dialect.name} successfully")
            return _open(engine)

    return connect_embedded(sqlite_path)


def provision_schema(handle: DatabaseHandle) -> None:
    """Create-if-absent for every registered table. Safe to call repeatedly."""
    # Import models so they are registered on Base.metadata
    import knowledge_extractor.features.analysis.data.sql_models  # noqa: F401

    try:
        Base.metadata.create_all(bind=handle.engine)
    except SQLAlchemyError as e:
        raise PersistenceError(f"failed to create tables: {e}") from e

    logger.info(f"Database tables created/verified on {handle.dialect.value}")
