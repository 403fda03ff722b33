"""
Database configuration and session management
"""
import time
from contextlib import contextmanager
from typing import Generator, Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.logging_config import LoggingConfig
from app.core.metrics import (db_queries_total, db_query_duration_seconds,
                              db_transactions_rolled_back_total)

logger = LoggingConfig.get_logger(__name__)

# Lazy initialization - don't create engine at module level
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

Base = declarative_base()


def _setup_db_events(engine: Engine):
    """Setup SQLAlchemy event listeners for metrics and SQLite pragmas"""

    @event.listens_for(engine, "before_cursor_execute")
    def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def receive_after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        if conn.info.get('query_start_time'):
            duration = time.time() - conn.info['query_start_time'].pop()
            operation = statement.strip().split()[0].lower() if statement.strip() else "unknown"
            db_queries_total.labels(operation=operation).inc()
            db_query_duration_seconds.labels(operation=operation).observe(duration)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def enable_sqlite_foreign_keys(dbapi_conn, connection_record):
            # SQLite ignores REFERENCES clauses unless asked
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()


def get_engine() -> Engine:
    """Get or create database engine (lazy initialization)"""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = settings.database_url

        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {
                "pool_size": settings.database_pool_size,
                "max_overflow": settings.database_max_overflow,
                "pool_pre_ping": True,
                "connect_args": {"connect_timeout": 5},
            }

        _engine = create_engine(url, echo=settings.log_sqlalchemy, **kwargs)

        _setup_db_events(_engine)
        logger.info(f"Database engine created for dialect '{_engine.dialect.name}'")

    return _engine


def get_session_local() -> sessionmaker:
    """Get or create session factory (lazy initialization)"""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def __getattr__(name):
    """Module-level access to engine and SessionLocal"""
    if name == 'engine':
        return get_engine()
    elif name == 'SessionLocal':
        return get_session_local()
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session, operation: str) -> Iterator[Session]:
    """
    Run a block of writes as one transaction.

    Commits when the block exits normally; on any exception the session is
    rolled back and the exception propagates.

    Args:
        db: Database session
        operation: Label used in logs and rollback metrics
    """
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        db_transactions_rolled_back_total.labels(operation=operation).inc()
        logger.warning(f"Transaction '{operation}' rolled back: {type(e).__name__}: {e}")
        raise
