# session_attendance/crud/crud_notification.py
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from session_attendance.models.notification import Notification


class CRUDNotification:
    """Writes notification records for the delivery pipeline to pick up."""

    def create(
        self,
        db: Session,
        *,
        user_id: str,
        type: str,
        title: str,
        message: str,
        link: Optional[str],
        created_at: datetime,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            link=link,
            read=False,
            created_at=created_at,
        )
        db.add(notification)
        db.flush()
        return notification


# Singleton instance
notification = CRUDNotification()
