# session_attendance/crud/crud_waitlist.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from session_attendance.models.waitlist import WaitlistEntry


class CRUDWaitlist:
    """
    Waitlist ledger with FIFO ordering on (created_at, id).
    """

    def _fifo_order(self):
        return (WaitlistEntry.created_at.asc(), WaitlistEntry.id.asc())

    def get_by_session_and_user(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str
    ) -> Optional[WaitlistEntry]:
        """Get waitlist entry for specific session and user"""
        return db.query(WaitlistEntry).filter(
            and_(
                WaitlistEntry.session_id == session_id,
                WaitlistEntry.user_id == user_id
            )
        ).first()

    def count_for_session(self, db: Session, *, session_id: str) -> int:
        return db.query(func.count(WaitlistEntry.id)).filter(
            WaitlistEntry.session_id == session_id
        ).scalar() or 0

    def get_session_waitlist(self, db: Session, *, session_id: str) -> List[WaitlistEntry]:
        """All entries for a session in promotion order"""
        return db.query(WaitlistEntry).filter(
            WaitlistEntry.session_id == session_id
        ).order_by(*self._fifo_order()).all()

    def create_entry(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str,
        position: int,
        created_at: datetime
    ) -> WaitlistEntry:
        """Create a new waitlist entry (flushes, raises IntegrityError on duplicate)"""
        entry = WaitlistEntry(
            session_id=session_id,
            user_id=user_id,
            position=position,
            notified=False,
            created_at=created_at
        )
        db.add(entry)
        db.flush()
        return entry

    def delete_user_entry(
        self,
        db: Session,
        *,
        session_id: str,
        user_id: str
    ) -> bool:
        """Remove a user's entry. Returns False if there was none."""
        deleted = db.query(WaitlistEntry).filter(
            and_(
                WaitlistEntry.session_id == session_id,
                WaitlistEntry.user_id == user_id
            )
        ).delete(synchronize_session=False)
        return deleted > 0

    def get_next_unnotified(self, db: Session, *, session_id: str) -> Optional[WaitlistEntry]:
        """
        Earliest entry that has not been notified yet, row-locked so a
        concurrent cancellation cannot promote the same user.
        """
        return db.query(WaitlistEntry).filter(
            and_(
                WaitlistEntry.session_id == session_id,
                WaitlistEntry.notified.is_(False)
            )
        ).order_by(*self._fifo_order()).limit(1).with_for_update().first()

    def mark_notified(
        self,
        db: Session,
        *,
        entry: WaitlistEntry,
        notified_at: datetime
    ) -> WaitlistEntry:
        entry.notified = True
        entry.notified_at = notified_at
        db.flush()
        return entry


# Singleton instance
waitlist = CRUDWaitlist()
