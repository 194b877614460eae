# session_attendance/core/errors.py
"""
Domain error taxonomy for attendance and waitlist operations.

Every business-rule rejection is raised as a DomainError subclass carrying a
closed ErrorCode. The HTTP layer maps codes to statuses in one table
(see api/errors.py), so nothing downstream ever matches on message text.
"""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Closed set of error kinds surfaced by the service layer."""

    # Not-found class
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    ATTENDANCE_NOT_FOUND = "ATTENDANCE_NOT_FOUND"

    # Precondition-violation class
    SESSION_PAST = "SESSION_PAST"
    SESSION_FULL = "SESSION_FULL"
    ALREADY_JOINED = "ALREADY_JOINED"
    ALREADY_ATTENDING = "ALREADY_ATTENDING"
    ALREADY_ON_WAITLIST = "ALREADY_ON_WAITLIST"
    NOT_ON_WAITLIST = "NOT_ON_WAITLIST"
    NOT_SESSION_HOST = "NOT_SESSION_HOST"
    SESSION_NOT_STARTED = "SESSION_NOT_STARTED"
    ATTENDANCE_ALREADY_MARKED = "ATTENDANCE_ALREADY_MARKED"
    NOT_PARTICIPANT = "NOT_PARTICIPANT"

    # Concurrency class
    TRANSACTION_TIMEOUT = "TRANSACTION_TIMEOUT"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    retryable: bool = False

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class SessionNotFoundError(DomainError):
    code = ErrorCode.SESSION_NOT_FOUND

    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found", session_id=session_id)
        self.session_id = session_id


class AttendanceNotFoundError(DomainError):
    code = ErrorCode.ATTENDANCE_NOT_FOUND

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "No attendance found for this session",
            session_id=session_id,
            user_id=user_id,
        )


class SessionPastError(DomainError):
    code = ErrorCode.SESSION_PAST

    def __init__(self, session_id: str) -> None:
        super().__init__("Session has already started", session_id=session_id)


class SessionFullError(DomainError):
    code = ErrorCode.SESSION_FULL

    def __init__(self, session_id: str, max_participants: int) -> None:
        super().__init__(
            "Session is full",
            session_id=session_id,
            max_participants=max_participants,
        )
        self.max_participants = max_participants


class AlreadyJoinedError(DomainError):
    code = ErrorCode.ALREADY_JOINED

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "Already marked attendance for this session",
            session_id=session_id,
            user_id=user_id,
        )


class AlreadyAttendingError(DomainError):
    code = ErrorCode.ALREADY_ATTENDING

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "You are already attending this session",
            session_id=session_id,
            user_id=user_id,
        )


class AlreadyOnWaitlistError(DomainError):
    code = ErrorCode.ALREADY_ON_WAITLIST

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "You are already on the waitlist",
            session_id=session_id,
            user_id=user_id,
        )


class NotOnWaitlistError(DomainError):
    code = ErrorCode.NOT_ON_WAITLIST

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "You are not on the waitlist",
            session_id=session_id,
            user_id=user_id,
        )


class NotSessionHostError(DomainError):
    code = ErrorCode.NOT_SESSION_HOST

    def __init__(self, session_id: str) -> None:
        super().__init__(
            "Only the session host can manage attendance", session_id=session_id
        )


class SessionNotStartedError(DomainError):
    code = ErrorCode.SESSION_NOT_STARTED

    def __init__(self, session_id: str) -> None:
        super().__init__(
            "Cannot mark attendance for future sessions", session_id=session_id
        )


class AttendanceAlreadyMarkedError(DomainError):
    code = ErrorCode.ATTENDANCE_ALREADY_MARKED

    def __init__(self, session_id: str) -> None:
        super().__init__(
            "Attendance has already been marked for this session",
            session_id=session_id,
        )


class NotParticipantError(DomainError):
    code = ErrorCode.NOT_PARTICIPANT

    def __init__(self, session_id: str, user_ids: list[str]) -> None:
        super().__init__(
            f"Some users are not participants: {', '.join(user_ids)}",
            session_id=session_id,
            user_ids=user_ids,
        )
        self.user_ids = user_ids


class TransactionTimeoutError(DomainError):
    """The store could not run the transaction in time; safe to retry."""

    code = ErrorCode.TRANSACTION_TIMEOUT
    retryable = True

    def __init__(self, reason: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            "The request could not be completed in time, please retry",
            reason=reason,
        )
        self.reason = reason
        self.__cause__ = cause
