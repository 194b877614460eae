# session_attendance/models/session.py
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from session_attendance.db.base_class import Base


class Session(Base):
    """
    Scheduled sports session.

    Owned by the session catalogue; this service only reads it. A NULL
    max_participants means the session has no capacity limit.
    """
    __tablename__ = "sessions"

    id = Column(String, primary_key=True, default=lambda: f"ses_{uuid.uuid4().hex[:12]}")
    sport_type = Column(String(50), nullable=False)
    date_time = Column(DateTime(timezone=True), nullable=False, index=True)
    max_participants = Column(Integer, nullable=True)
    created_by = Column(String, nullable=False, index=True)  # host user id
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint(
            'max_participants IS NULL OR max_participants > 0',
            name='check_max_participants_positive',
        ),
    )
