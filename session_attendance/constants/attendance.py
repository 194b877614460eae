# session_attendance/constants/attendance.py
"""
Constants for attendance status values and notification types.
"""

from enum import Enum


class AttendanceStatus(str, Enum):
    """Lifecycle of an attendance record."""
    REGISTERED = "REGISTERED"
    ATTENDED = "ATTENDED"
    NO_SHOW = "NO_SHOW"

    @classmethod
    def is_marked(cls, status: str) -> bool:
        """True once the host has recorded the outcome for this attendee."""
        return status in (cls.ATTENDED.value, cls.NO_SHOW.value)


class NotificationType:
    """Notification record types emitted by this service."""
    WAITLIST_SPOT_AVAILABLE = "waitlist_spot_available"
    NO_SHOW_WARNING = "no_show_warning"
