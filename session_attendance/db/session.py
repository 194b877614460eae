# session_attendance/db/session.py
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from session_attendance.core.config import settings

logger = logging.getLogger(__name__)


def _enable_sqlite_immediate_transactions(engine: Engine) -> None:
    """
    Make pysqlite take the write lock when a transaction begins.

    The driver normally defers BEGIN until the first write, which lets two
    transactions read the same attendance count before either inserts.
    BEGIN IMMEDIATE serializes writers for the whole database; the busy
    timeout passed at connect time bounds how long a writer waits.
    """

    @event.listens_for(engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(
    url: str,
    *,
    max_wait_seconds: float = settings.TRANSACTION_MAX_WAIT_SECONDS,
    pool_size: int = settings.DB_POOL_SIZE,
) -> Engine:
    """
    Create an engine whose connection checkout is bounded by max_wait_seconds.
    """
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": max_wait_seconds},
        )
        _enable_sqlite_immediate_transactions(engine)
        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size,
        pool_timeout=max_wait_seconds,
    )


# The engine is the entry point to the database and owns the connection pool.
engine = build_engine(settings.DATABASE_URL)

# Objects stay readable after commit: transactional services return the rows
# they wrote once their session is already closed.
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)
