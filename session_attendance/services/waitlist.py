# session_attendance/services/waitlist.py
"""
Waitlist join / leave / view.

The queue is unbounded and joining it does not depend on capacity. Joining
takes the session row lock so the attendance check cannot interleave with a
concurrent join of the same session. ``position`` stored on an entry
is a display hint captured at join time and can go stale under concurrent
joins; promotion always orders by (created_at, id).
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from session_attendance.core.errors import (
    AlreadyAttendingError,
    AlreadyOnWaitlistError,
    NotOnWaitlistError,
    SessionNotFoundError,
    SessionPastError,
)
from session_attendance.crud.crud_attendance import attendance as attendance_crud
from session_attendance.crud.crud_session import session as session_crud
from session_attendance.crud.crud_waitlist import waitlist as waitlist_crud
from session_attendance.db.transaction import run_in_transaction
from session_attendance.models.waitlist import WaitlistEntry
from session_attendance.utils.time_utils import has_started, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaitlistView:
    count: int
    user_position: Optional[int]
    entries: List[WaitlistEntry]


class WaitlistService:

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        now_fn: Callable[[], datetime] = utc_now,
    ) -> None:
        self._session_factory = session_factory
        self._now = now_fn

    def join(self, session_id: str, user_id: str) -> WaitlistEntry:
        """
        Add ``user_id`` to the back of a session's waitlist.

        Only upcoming sessions can be queued for, and only by users who do
        not already hold a spot.

        Raises:
            SessionNotFoundError, SessionPastError, AlreadyAttendingError,
            AlreadyOnWaitlistError, TransactionTimeoutError
        """

        def work(db: Session) -> WaitlistEntry:
            now = self._now()
            session_obj = session_crud.get_for_update(db, session_id)
            if not session_obj:
                raise SessionNotFoundError(session_id)

            if has_started(session_obj.date_time, now):
                raise SessionPastError(session_id)

            if attendance_crud.get_user_attendance(db, session_id=session_id, user_id=user_id):
                raise AlreadyAttendingError(session_id, user_id)

            if waitlist_crud.get_by_session_and_user(db, session_id=session_id, user_id=user_id):
                raise AlreadyOnWaitlistError(session_id, user_id)

            position = waitlist_crud.count_for_session(db, session_id=session_id) + 1
            return waitlist_crud.create_entry(
                db,
                session_id=session_id,
                user_id=user_id,
                position=position,
                created_at=now,
            )

        try:
            entry = run_in_transaction(self._session_factory, work, operation="waitlist_join")
        except IntegrityError as e:
            raise AlreadyOnWaitlistError(session_id, user_id) from e

        logger.info(f"User {user_id} joined waitlist for session {session_id} at position {entry.position}")
        return entry

    def leave(self, session_id: str, user_id: str) -> None:
        """
        Remove ``user_id`` from a session's waitlist. Nobody is promoted.

        Raises:
            NotOnWaitlistError, TransactionTimeoutError
        """

        def work(db: Session) -> None:
            if not waitlist_crud.delete_user_entry(db, session_id=session_id, user_id=user_id):
                raise NotOnWaitlistError(session_id, user_id)

        run_in_transaction(self._session_factory, work, operation="waitlist_leave")
        logger.info(f"User {user_id} left waitlist for session {session_id}")

    def get_waitlist(self, session_id: str, viewer_id: Optional[str] = None) -> WaitlistView:
        """Entries in promotion order, with the viewer's 1-based place if queued."""
        with self._session_factory() as db:
            if not session_crud.get(db, session_id):
                raise SessionNotFoundError(session_id)
            entries = waitlist_crud.get_session_waitlist(db, session_id=session_id)

        user_position = None
        if viewer_id is not None:
            for index, entry in enumerate(entries, start=1):
                if entry.user_id == viewer_id:
                    user_position = index
                    break

        return WaitlistView(count=len(entries), user_position=user_position, entries=entries)
