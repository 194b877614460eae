# session_attendance/crud/crud_session.py
from typing import Optional

from sqlalchemy.orm import Session

from session_attendance.models.session import Session as SessionModel


class CRUDSession:
    """Read-only access to scheduled sessions."""

    def get(self, db: Session, session_id: str) -> Optional[SessionModel]:
        return db.query(SessionModel).filter(SessionModel.id == session_id).first()

    def get_for_update(self, db: Session, session_id: str) -> Optional[SessionModel]:
        """
        Load the session and lock its row until the transaction ends.

        Every join and cancel on the same session goes through this lock,
        so capacity checks for one session run one at a time.
        """
        return (
            db.query(SessionModel)
            .filter(SessionModel.id == session_id)
            .with_for_update()
            .first()
        )


# Singleton instance
session = CRUDSession()
