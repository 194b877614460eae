# session_attendance/models/attendance.py
"""
Attendance record model: one row per confirmed participant of a session.

The (session_id, user_id) unique constraint backs up the join transaction's
duplicate check when two joins for the same user race.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from session_attendance.constants.attendance import AttendanceStatus
from session_attendance.db.base_class import Base


class AttendanceRecord(Base):
    __tablename__ = "session_attendance"

    id = Column(String, primary_key=True, default=lambda: f"att_{uuid.uuid4().hex[:12]}")
    session_id = Column(String, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)  # No FK - users live in the identity service
    status = Column(
        String(20),
        nullable=False,
        default=AttendanceStatus.REGISTERED.value,
        server_default=AttendanceStatus.REGISTERED.value,
    )  # REGISTERED, ATTENDED, NO_SHOW
    marked_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    attended_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint('session_id', 'user_id', name='unique_session_attendance_user'),
    )
