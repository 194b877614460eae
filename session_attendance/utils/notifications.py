# session_attendance/utils/notifications.py
"""
Notification record builders.

These only create rows inside the caller's transaction. Sending the
email/push for a record is the delivery pipeline's job, so a rolled-back
promotion never leaves a notification behind.
"""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from session_attendance.constants.attendance import NotificationType
from session_attendance.crud.crud_notification import notification as notification_crud
from session_attendance.models.notification import Notification
from session_attendance.models.session import Session as SessionModel

logger = logging.getLogger(__name__)


def session_link(session_id: str) -> str:
    return f"/sessions/{session_id}"


def create_spot_available_notification(
    db: Session,
    *,
    user_id: str,
    session: SessionModel,
    now: datetime,
) -> Notification:
    """Tell a waitlisted user that a spot opened up on a session."""
    record = notification_crud.create(
        db,
        user_id=user_id,
        type=NotificationType.WAITLIST_SPOT_AVAILABLE,
        title="A spot opened up",
        message=(
            f"A spot is now available for {session.sport_type}. "
            "Join soon, spots go to whoever confirms first!"
        ),
        link=session_link(session.id),
        created_at=now,
    )
    logger.info(f"Queued spot-available notification for user {user_id}, session {session.id}")
    return record


def create_no_show_notification(
    db: Session,
    *,
    user_id: str,
    session: SessionModel,
    now: datetime,
) -> Notification:
    return notification_crud.create(
        db,
        user_id=user_id,
        type=NotificationType.NO_SHOW_WARNING,
        title="Missed Session",
        message="You were marked as a no-show for a session.",
        link=session_link(session.id),
        created_at=now,
    )
