# session_attendance/services/attendance.py
"""
Attendance service: joining, cancelling and marking session attendance.

Join and cancel each run as one serializable transaction holding the
session row lock, so the capacity check and the ledger write cannot be
interleaved with another join or cancel on the same session.

Promotion notifies, it does not reserve: after a cancellation the earliest
waiting user is told a spot opened up, but the spot is not held for them.
They join through the normal join path and may lose the spot to someone
who joins directly first.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from session_attendance.constants.attendance import AttendanceStatus
from session_attendance.core.errors import (
    AlreadyJoinedError,
    AttendanceAlreadyMarkedError,
    AttendanceNotFoundError,
    NotParticipantError,
    NotSessionHostError,
    SessionFullError,
    SessionNotFoundError,
    SessionNotStartedError,
    SessionPastError,
)
from session_attendance.crud.crud_attendance import attendance as attendance_crud
from session_attendance.crud.crud_session import session as session_crud
from session_attendance.crud.crud_waitlist import waitlist as waitlist_crud
from session_attendance.db.transaction import run_in_transaction
from session_attendance.models.attendance import AttendanceRecord
from session_attendance.models.session import Session as SessionModel
from session_attendance.utils.notifications import (
    create_no_show_notification,
    create_spot_available_notification,
)
from session_attendance.utils.time_utils import has_started, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancelResult:
    promoted: bool
    promoted_user_id: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRoster:
    session: SessionModel
    records: List[AttendanceRecord]
    is_past: bool


class AttendanceService:
    """Join / cancel / mark operations on the attendance ledger."""

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        now_fn: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._now = now_fn

    def _load_locked(self, db: Session, session_id: str) -> SessionModel:
        session_obj = session_crud.get_for_update(db, session_id)
        if not session_obj:
            raise SessionNotFoundError(session_id)
        return session_obj

    # ==================== Join ====================

    def join(self, session_id: str, user_id: str) -> AttendanceRecord:
        """
        Register ``user_id`` for a session.

        Preconditions are checked in order, first failure wins:
        session exists, session has not started, session has room,
        user has not joined already.

        Raises:
            SessionNotFoundError, SessionPastError, SessionFullError,
            AlreadyJoinedError, TransactionTimeoutError
        """

        def work(db: Session) -> AttendanceRecord:
            now = self._now()
            session_obj = self._load_locked(db, session_id)

            if has_started(session_obj.date_time, now):
                raise SessionPastError(session_id)

            if session_obj.max_participants is not None:
                current_count = attendance_crud.count_for_session(db, session_id=session_id)
                if current_count >= session_obj.max_participants:
                    logger.info(
                        f"Join rejected for user {user_id} - session {session_id} at capacity "
                        f"({current_count}/{session_obj.max_participants})"
                    )
                    raise SessionFullError(session_id, session_obj.max_participants)

            existing = attendance_crud.get_user_attendance(
                db, session_id=session_id, user_id=user_id
            )
            if existing:
                raise AlreadyJoinedError(session_id, user_id)

            record = attendance_crud.create(
                db, session_id=session_id, user_id=user_id, marked_at=now
            )

            # A waitlist entry is pointless once the user holds a spot.
            if waitlist_crud.delete_user_entry(db, session_id=session_id, user_id=user_id):
                logger.info(f"Removed user {user_id} from waitlist of session {session_id} after joining")

            return record

        try:
            record = run_in_transaction(self._session_factory, work, operation="join")
        except IntegrityError as e:
            # Two joins for the same user raced past the existence check.
            logger.info(
                f"Duplicate join for user {user_id}, session {session_id} caught by unique constraint"
            )
            raise AlreadyJoinedError(session_id, user_id) from e

        logger.info(f"User {user_id} joined session {session_id}")
        return record

    # ==================== Cancel & promote ====================

    def cancel(self, session_id: str, user_id: str) -> CancelResult:
        """
        Remove ``user_id`` from a session and, if the session is still
        upcoming, notify the earliest waitlisted user who has not been
        notified yet. At most one user is promoted per call.

        Raises:
            SessionNotFoundError, AttendanceNotFoundError, TransactionTimeoutError
        """

        def work(db: Session) -> CancelResult:
            now = self._now()
            session_obj = self._load_locked(db, session_id)

            if not attendance_crud.delete_user_attendance(
                db, session_id=session_id, user_id=user_id
            ):
                raise AttendanceNotFoundError(session_id, user_id)

            if has_started(session_obj.date_time, now):
                return CancelResult(promoted=False)

            entry = waitlist_crud.get_next_unnotified(db, session_id=session_id)
            if not entry:
                return CancelResult(promoted=False)

            waitlist_crud.mark_notified(db, entry=entry, notified_at=now)
            create_spot_available_notification(
                db, user_id=entry.user_id, session=session_obj, now=now
            )
            return CancelResult(promoted=True, promoted_user_id=entry.user_id)

        result = run_in_transaction(self._session_factory, work, operation="cancel")

        logger.info(f"User {user_id} cancelled attendance for session {session_id}")
        if result.promoted:
            logger.info(
                f"Notified waitlisted user {result.promoted_user_id} of open spot "
                f"in session {session_id}"
            )
        return result

    # ==================== Host roster ====================

    def get_attendance(self, session_id: str, caller_id: str) -> AttendanceRoster:
        """Roster of a session, visible to its host only."""
        with self._session_factory() as db:
            session_obj = session_crud.get(db, session_id)
            if not session_obj:
                raise SessionNotFoundError(session_id)
            if session_obj.created_by != caller_id:
                raise NotSessionHostError(session_id)
            records = attendance_crud.get_by_session(db, session_id=session_id)
            return AttendanceRoster(
                session=session_obj,
                records=records,
                is_past=has_started(session_obj.date_time, self._now()),
            )

    def mark_attendance(
        self,
        session_id: str,
        caller_id: str,
        marks: Sequence[Tuple[str, bool]],
    ) -> List[AttendanceRecord]:
        """
        Record who showed up. Host only, once per session, after it started.

        Every no-show gets a warning notification in the same transaction.
        """

        def work(db: Session) -> List[AttendanceRecord]:
            now = self._now()
            session_obj = self._load_locked(db, session_id)

            if session_obj.created_by != caller_id:
                raise NotSessionHostError(session_id)
            if not has_started(session_obj.date_time, now):
                raise SessionNotStartedError(session_id)

            records = attendance_crud.get_by_session(db, session_id=session_id)
            if any(AttendanceStatus.is_marked(r.status) for r in records):
                raise AttendanceAlreadyMarkedError(session_id)

            by_user = {r.user_id: r for r in records}
            invalid = [user_id for user_id, _ in marks if user_id not in by_user]
            if invalid:
                raise NotParticipantError(session_id, invalid)

            updated = []
            for user_id, attended in marks:
                status = AttendanceStatus.ATTENDED if attended else AttendanceStatus.NO_SHOW
                record = attendance_crud.set_status(
                    db, record=by_user[user_id], status=status, attended_at=now
                )
                if not attended:
                    create_no_show_notification(
                        db, user_id=user_id, session=session_obj, now=now
                    )
                updated.append(record)
            return updated

        updated = run_in_transaction(
            self._session_factory, work, operation="mark_attendance"
        )
        logger.info(f"Attendance marked for {len(updated)} users in session {session_id}")
        return updated
