# session_attendance/db/transaction.py
"""
Callback-scoped transaction runner.

run_in_transaction() opens a fresh ORM session, starts a SERIALIZABLE
transaction, hands the session to a unit of work and commits what it did.
Any exception raised by the work (domain errors included) rolls the whole
unit back, so a partially applied join or promotion is never committed.

Bounds:
- waiting for a connection or a lock is limited by ``max_wait`` seconds
- the unit itself is limited by ``timeout`` seconds
- serialization failures are retried with exponential backoff up to
  ``max_retries`` attempts while the timeout allows

When a bound is exceeded the caller gets TransactionTimeoutError, which is
retryable.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_exponential,
)

from session_attendance.core.config import settings
from session_attendance.core.errors import TransactionTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# SQLSTATE codes
SERIALIZATION_FAILURE = "40001"
DEADLOCK_DETECTED = "40P01"
QUERY_CANCELED = "57014"
LOCK_NOT_AVAILABLE = "55P03"

_RETRYABLE_SQLSTATES = {SERIALIZATION_FAILURE, DEADLOCK_DETECTED}
_TIMEOUT_SQLSTATES = {QUERY_CANCELED, LOCK_NOT_AVAILABLE}


class SerializationConflict(Exception):
    """Internal marker for a store-reported serialization failure."""


def _sqlstate(error: sa_exc.DBAPIError) -> Optional[str]:
    orig = error.orig
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _is_sqlite_busy(error: sa_exc.DBAPIError) -> bool:
    message = str(error.orig).lower()
    return "database is locked" in message or "database is busy" in message


def _apply_postgres_timeouts(db: Session, max_wait: float, timeout: float) -> None:
    # SET LOCAL does not accept bind parameters; values are ints we computed.
    db.execute(text(f"SET LOCAL lock_timeout = {int(max_wait * 1000)}"))
    db.execute(text(f"SET LOCAL statement_timeout = {int(timeout * 1000)}"))


def _run_once(
    session_factory: sessionmaker,
    work: Callable[[Session], T],
    *,
    isolation_level: str,
    max_wait: float,
    timeout: float,
    operation: str,
) -> T:
    started = time.monotonic()
    db = session_factory()
    try:
        # Isolation must be set before anything else touches the session.
        connection = db.connection(
            execution_options={"isolation_level": isolation_level}
        )
        if connection.dialect.name == "postgresql":
            _apply_postgres_timeouts(db, max_wait, timeout)

        result = work(db)

        elapsed = time.monotonic() - started
        if elapsed > timeout:
            raise TransactionTimeoutError(
                f"{operation} ran for {elapsed:.2f}s, limit is {timeout:.2f}s"
            )

        db.commit()
        return result
    except BaseException:
        db.rollback()
        raise
    finally:
        db.close()


def _translate(error: Exception, operation: str) -> Exception:
    """Map store errors to the concurrency class, leave everything else alone."""
    if isinstance(error, sa_exc.TimeoutError):
        return TransactionTimeoutError(
            f"{operation}: timed out waiting for a database connection", error
        )
    if isinstance(error, sa_exc.IntegrityError):
        # Unique-constraint races are remapped by the caller, who knows
        # which precondition the constraint duplicates.
        return error
    if isinstance(error, sa_exc.DBAPIError):
        code = _sqlstate(error)
        if code in _RETRYABLE_SQLSTATES:
            return SerializationConflict(str(error.orig))
        if code in _TIMEOUT_SQLSTATES:
            return TransactionTimeoutError(
                f"{operation}: store cancelled the transaction ({code})", error
            )
        if isinstance(error, sa_exc.OperationalError) and _is_sqlite_busy(error):
            return TransactionTimeoutError(
                f"{operation}: timed out waiting for the database lock", error
            )
    return error


def run_in_transaction(
    session_factory: sessionmaker,
    work: Callable[[Session], T],
    *,
    isolation_level: str = "SERIALIZABLE",
    max_wait: Optional[float] = None,
    timeout: Optional[float] = None,
    max_retries: Optional[int] = None,
    operation: str = "transaction",
) -> T:
    """
    Execute ``work(db)`` atomically and return its result.

    Raises:
        DomainError: whatever the work raised, after rollback.
        TransactionTimeoutError: a wait or execution bound was exceeded, or
            serialization failures persisted through every retry.
        sqlalchemy.exc.IntegrityError: a constraint the work did not handle.
    """
    max_wait = settings.TRANSACTION_MAX_WAIT_SECONDS if max_wait is None else max_wait
    timeout = settings.TRANSACTION_TIMEOUT_SECONDS if timeout is None else timeout
    max_retries = (
        settings.TRANSACTION_MAX_RETRIES if max_retries is None else max_retries
    )

    def attempt() -> T:
        try:
            return _run_once(
                session_factory,
                work,
                isolation_level=isolation_level,
                max_wait=max_wait,
                timeout=timeout,
                operation=operation,
            )
        except Exception as e:
            translated = _translate(e, operation)
            if translated is e:
                raise
            raise translated from e

    retrying = Retrying(
        stop=stop_after_attempt(max(1, max_retries)) | stop_after_delay(timeout),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception(lambda e: isinstance(e, SerializationConflict)),
        reraise=False,
    )
    try:
        return retrying(attempt)
    except RetryError as e:
        attempts = e.last_attempt.attempt_number
        logger.warning(
            f"{operation} gave up after {attempts} serialization conflicts",
            extra={"operation": operation, "attempts": attempts},
        )
        raise TransactionTimeoutError(
            f"{operation}: serialization conflict persisted after {attempts} attempts",
            e.last_attempt.exception(),
        ) from e
