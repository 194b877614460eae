from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from session_attendance.crud import attendance, waitlist
from tests.utils.session import add_waitlist_entry, create_random_session


def test_next_unnotified_follows_join_order(session_factory):
    """
    Tests that promotion order is created_at first, insertion order second.
    """
    # ARRANGE
    session_id = create_random_session(session_factory, max_participants=1)
    base = datetime.now(timezone.utc)
    add_waitlist_entry(session_factory, session_id, "user_notified", created_at=base - timedelta(minutes=5), notified=True)
    add_waitlist_entry(session_factory, session_id, "user_b", created_at=base)
    add_waitlist_entry(session_factory, session_id, "user_c", created_at=base)
    add_waitlist_entry(session_factory, session_id, "user_a", created_at=base - timedelta(minutes=1))

    # ACT
    with session_factory() as db:
        entry = waitlist.get_next_unnotified(db, session_id=session_id)
        ordered = [e.user_id for e in waitlist.get_session_waitlist(db, session_id=session_id)]

    # ASSERT
    assert entry.user_id == "user_a"
    assert ordered == ["user_notified", "user_a", "user_b", "user_c"]


def test_next_unnotified_empty(session_factory):
    session_id = create_random_session(session_factory, max_participants=1)

    with session_factory() as db:
        assert waitlist.get_next_unnotified(db, session_id=session_id) is None


def test_mark_notified(session_factory):
    session_id = create_random_session(session_factory, max_participants=1)
    add_waitlist_entry(session_factory, session_id, "user_a")
    now = datetime.now(timezone.utc)

    with session_factory() as db:
        entry = waitlist.get_next_unnotified(db, session_id=session_id)
        waitlist.mark_notified(db, entry=entry, notified_at=now)
        db.commit()

    with session_factory() as db:
        stored = waitlist.get_by_session_and_user(db, session_id=session_id, user_id="user_a")
        assert stored.notified is True
        assert stored.notified_at is not None
        assert waitlist.get_next_unnotified(db, session_id=session_id) is None


def test_waitlist_entry_is_unique_per_user(session_factory):
    session_id = create_random_session(session_factory, max_participants=1)
    add_waitlist_entry(session_factory, session_id, "user_a")

    with session_factory() as db:
        with pytest.raises(IntegrityError):
            waitlist.create_entry(
                db,
                session_id=session_id,
                user_id="user_a",
                position=2,
                created_at=datetime.now(timezone.utc),
            )
        db.rollback()


def test_delete_user_entry_reports_missing(session_factory):
    session_id = create_random_session(session_factory, max_participants=1)
    add_waitlist_entry(session_factory, session_id, "user_a")

    with session_factory() as db:
        assert waitlist.delete_user_entry(db, session_id=session_id, user_id="user_a") is True
        assert waitlist.delete_user_entry(db, session_id=session_id, user_id="user_a") is False
        assert waitlist.count_for_session(db, session_id=session_id) == 0
        db.commit()


def test_attendance_record_is_unique_per_user(session_factory):
    session_id = create_random_session(session_factory, max_participants=3)
    now = datetime.now(timezone.utc)

    with session_factory() as db:
        attendance.create(db, session_id=session_id, user_id="user_a", marked_at=now)
        with pytest.raises(IntegrityError):
            attendance.create(db, session_id=session_id, user_id="user_a", marked_at=now)
        db.rollback()

    with session_factory() as db:
        assert attendance.count_for_session(db, session_id=session_id) == 0
