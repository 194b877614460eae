# session_attendance/api/v1/endpoints/attendance.py
import logging

from fastapi import APIRouter, Depends, status

from session_attendance.api import deps
from session_attendance.schemas.attendance import (
    AttendanceRecordResponse,
    AttendanceRequest,
    CancelResponse,
    JoinResponse,
)
from session_attendance.schemas.token import TokenPayload
from session_attendance.services.attendance import AttendanceService

router = APIRouter(tags=["Attendance"])
logger = logging.getLogger(__name__)


@router.post("/attendance", response_model=JoinResponse, status_code=status.HTTP_201_CREATED)
def join_session(
    attendance_in: AttendanceRequest,
    service: AttendanceService = Depends(deps.get_attendance_service),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Join a session.

    **Errors**:
    - 400: Session already started, session full, or already joined
    - 401: Missing or invalid token
    - 404: Session not found
    - 503: Transaction timed out (retry with backoff)
    """
    record = service.join(attendance_in.session_id, current_user.user_id)
    return JoinResponse(
        message="Attendance marked successfully",
        attendance=AttendanceRecordResponse.model_validate(record),
    )


@router.delete("/attendance", response_model=CancelResponse)
def cancel_attendance(
    attendance_in: AttendanceRequest,
    service: AttendanceService = Depends(deps.get_attendance_service),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Cancel attendance and notify the next person on the waitlist.

    **Errors**:
    - 401: Missing or invalid token
    - 404: Session not found, or not attending it
    - 503: Transaction timed out (retry with backoff)
    """
    result = service.cancel(attendance_in.session_id, current_user.user_id)
    return CancelResponse(
        message="Attendance cancelled successfully",
        waitlistNotified=result.promoted,
    )
