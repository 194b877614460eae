# session_attendance/api/v1/endpoints/session_attendance.py
from fastapi import APIRouter, Depends

from session_attendance.api import deps
from session_attendance.schemas.attendance import (
    AttendanceRecordResponse,
    AttendanceRosterResponse,
    AttendanceUpdate,
    MarkAttendanceRequest,
    MarkAttendanceResponse,
)
from session_attendance.schemas.token import TokenPayload
from session_attendance.services.attendance import AttendanceService

router = APIRouter(tags=["Session Attendance"])


@router.get("/sessions/{session_id}/attendance", response_model=AttendanceRosterResponse)
def get_session_attendance(
    session_id: str,
    service: AttendanceService = Depends(deps.get_attendance_service),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Attendance roster. Host only."""
    roster = service.get_attendance(session_id, current_user.user_id)
    return AttendanceRosterResponse(
        session_id=roster.session.id,
        session_date=roster.session.date_time,
        is_past=roster.is_past,
        participants=[AttendanceRecordResponse.model_validate(r) for r in roster.records],
    )


@router.post("/sessions/{session_id}/attendance", response_model=MarkAttendanceResponse)
def mark_session_attendance(
    session_id: str,
    marks_in: MarkAttendanceRequest,
    service: AttendanceService = Depends(deps.get_attendance_service),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Mark who attended. Host only, after the session started, once.

    **Errors**:
    - 400: Session not started, already marked, or unknown participants
    - 403: Caller is not the host
    - 404: Session not found
    """
    updated = service.mark_attendance(
        session_id,
        current_user.user_id,
        [(mark.user_id, mark.attended) for mark in marks_in.attendees],
    )
    return MarkAttendanceResponse(
        message="Attendance marked successfully",
        updates=[AttendanceUpdate.model_validate(r) for r in updated],
    )
