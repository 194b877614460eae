# session_attendance/crud/__init__.py

from .crud_attendance import attendance
from .crud_notification import notification
from .crud_session import session
from .crud_waitlist import waitlist
