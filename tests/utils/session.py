# tests/utils/session.py
"""
Arrange/inspect helpers. Each one opens and closes its own ORM session so
no test ever holds the SQLite write lock while a service call runs.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import sessionmaker

from session_attendance.constants.attendance import AttendanceStatus
from session_attendance.models.attendance import AttendanceRecord
from session_attendance.models.notification import Notification
from session_attendance.models.session import Session
from session_attendance.models.waitlist import WaitlistEntry


def create_random_session(
    session_factory: sessionmaker,
    *,
    max_participants: Optional[int] = None,
    starts_in: timedelta = timedelta(days=1),
    created_by: str = "host_1",
    sport_type: str = "Futsal",
) -> str:
    """Creates a session starting ``starts_in`` from now and returns its id."""
    with session_factory() as db:
        session = Session(
            sport_type=sport_type,
            date_time=datetime.now(timezone.utc) + starts_in,
            max_participants=max_participants,
            created_by=created_by,
        )
        db.add(session)
        db.commit()
        return session.id


def add_attendance(
    session_factory: sessionmaker,
    session_id: str,
    user_id: str,
    status: AttendanceStatus = AttendanceStatus.REGISTERED,
) -> None:
    """Insert an attendance row directly, bypassing the join checks."""
    with session_factory() as db:
        db.add(
            AttendanceRecord(
                session_id=session_id,
                user_id=user_id,
                status=status.value,
                marked_at=datetime.now(timezone.utc),
            )
        )
        db.commit()


def add_waitlist_entry(
    session_factory: sessionmaker,
    session_id: str,
    user_id: str,
    *,
    created_at: Optional[datetime] = None,
    notified: bool = False,
) -> int:
    with session_factory() as db:
        entry = WaitlistEntry(
            session_id=session_id,
            user_id=user_id,
            notified=notified,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db.add(entry)
        db.commit()
        return entry.id


def attendee_ids(session_factory: sessionmaker, session_id: str) -> List[str]:
    with session_factory() as db:
        rows = db.query(AttendanceRecord).filter(AttendanceRecord.session_id == session_id).all()
        return sorted(row.user_id for row in rows)


def attendance_statuses(session_factory: sessionmaker, session_id: str) -> dict[str, str]:
    with session_factory() as db:
        rows = db.query(AttendanceRecord).filter(AttendanceRecord.session_id == session_id).all()
        return {row.user_id: row.status for row in rows}


def waitlist_entries(session_factory: sessionmaker, session_id: str) -> List[WaitlistEntry]:
    with session_factory() as db:
        return (
            db.query(WaitlistEntry)
            .filter(WaitlistEntry.session_id == session_id)
            .order_by(WaitlistEntry.id.asc())
            .all()
        )


def notifications(session_factory: sessionmaker, user_id: Optional[str] = None) -> List[Notification]:
    with session_factory() as db:
        query = db.query(Notification)
        if user_id is not None:
            query = query.filter(Notification.user_id == user_id)
        return query.order_by(Notification.created_at.asc()).all()
