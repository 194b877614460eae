# session_attendance/models/waitlist.py
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, false

from session_attendance.db.base_class import Base


class WaitlistEntry(Base):
    """
    A user queued for a slot on a session.

    Promotion order is (created_at, id) ascending. The integer id is
    assigned by the store in insert order and breaks created_at ties;
    ``position`` is only a display hint captured at join time.
    """
    __tablename__ = "session_waitlist"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)

    position = Column(Integer, nullable=True)

    notified = Column(Boolean, nullable=False, default=False, server_default=false())
    notified_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint('session_id', 'user_id', name='unique_session_waitlist_user'),
        Index('idx_session_waitlist_promotion', 'session_id', 'notified', 'created_at', 'id'),
        {'sqlite_autoincrement': True},
    )
