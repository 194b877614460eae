# session_attendance/models/__init__.py
# Import all models so Base.metadata knows every table (Alembic, tests).

from session_attendance.db.base_class import Base
from session_attendance.models.session import Session
from session_attendance.models.attendance import AttendanceRecord
from session_attendance.models.waitlist import WaitlistEntry
from session_attendance.models.notification import Notification
