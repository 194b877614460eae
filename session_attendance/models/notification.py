# session_attendance/models/notification.py
"""
In-app notification records.

This service only writes them; delivery (email/push) and the inbox are
handled elsewhere.
"""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text, false

from session_attendance.db.base_class import Base


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String, primary_key=True, default=lambda: f"ntf_{uuid.uuid4().hex[:12]}")
    user_id = Column(String, nullable=False, index=True)
    type = Column(String(50), nullable=False)  # waitlist_spot_available, no_show_warning
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String(500), nullable=True)
    read = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
