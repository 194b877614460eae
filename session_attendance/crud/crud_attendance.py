# session_attendance/crud/crud_attendance.py
"""
Attendance ledger: the confirmed participants of each session.

Methods here only flush. Committing is the job of the transaction that
called them (see db/transaction.py).
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from session_attendance.constants.attendance import AttendanceStatus
from session_attendance.models.attendance import AttendanceRecord


class CRUDAttendance:
    """CRUD operations for attendance records."""

    def get_user_attendance(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str,
    ) -> Optional[AttendanceRecord]:
        """Get a user's attendance record for a session (any status)."""
        return db.query(AttendanceRecord).filter(
            and_(
                AttendanceRecord.session_id == session_id,
                AttendanceRecord.user_id == user_id,
            )
        ).first()

    def count_for_session(self, db: Session, *, session_id: str) -> int:
        """Count attendance records for a session."""
        return db.query(func.count(AttendanceRecord.id)).filter(
            AttendanceRecord.session_id == session_id
        ).scalar() or 0

    def get_by_session(self, db: Session, *, session_id: str) -> List[AttendanceRecord]:
        """All attendance records for a session, earliest first."""
        return db.query(AttendanceRecord).filter(
            AttendanceRecord.session_id == session_id
        ).order_by(AttendanceRecord.marked_at.asc(), AttendanceRecord.id.asc()).all()

    def create(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str,
        marked_at: datetime,
    ) -> AttendanceRecord:
        """
        Insert a REGISTERED record.

        Raises sqlalchemy.exc.IntegrityError from the flush if the user
        already has a record for this session.
        """
        record = AttendanceRecord(
            session_id=session_id,
            user_id=user_id,
            status=AttendanceStatus.REGISTERED.value,
            marked_at=marked_at,
        )
        db.add(record)
        db.flush()
        return record

    def delete_user_attendance(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str,
    ) -> bool:
        """Hard-delete a user's record. Returns False if there was none."""
        deleted = db.query(AttendanceRecord).filter(
            and_(
                AttendanceRecord.session_id == session_id,
                AttendanceRecord.user_id == user_id,
            )
        ).delete(synchronize_session=False)
        return deleted > 0

    def set_status(
        self,
        db: Session,
        *,
        record: AttendanceRecord,
        status: AttendanceStatus,
        attended_at: datetime,
    ) -> AttendanceRecord:
        record.status = status.value
        record.attended_at = attended_at
        db.flush()
        return record


# Singleton instance
attendance = CRUDAttendance()
