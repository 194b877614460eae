# session_attendance/api/v1/endpoints/waitlist.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from session_attendance.api import deps
from session_attendance.schemas.token import TokenPayload
from session_attendance.schemas.waitlist import (
    WaitlistEntryResponse,
    WaitlistInfoResponse,
    WaitlistJoinResponse,
    WaitlistLeaveResponse,
    WaitlistPositionEntry,
)
from session_attendance.services.waitlist import WaitlistService

router = APIRouter(tags=["Waitlist"])
logger = logging.getLogger(__name__)


# ==================== Waitlist Endpoints ====================

@router.post(
    "/sessions/{session_id}/waitlist",
    response_model=WaitlistJoinResponse,
    status_code=status.HTTP_201_CREATED,
)
def join_waitlist(
    session_id: str,
    service: WaitlistService = Depends(deps.get_waitlist_service),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Join session waitlist.

    The returned position is a snapshot for display; the queue is served
    in the order users joined.

    **Errors**:
    - 400: Session already started, or caller already attending
    - 401: Missing or invalid token
    - 404: Session not found
    - 409: Already on waitlist
    """
    entry = service.join(session_id, current_user.user_id)
    return WaitlistJoinResponse(
        message=f"You're #{entry.position} on the waitlist",
        position=entry.position,
        waitlist=WaitlistEntryResponse.model_validate(entry),
    )


@router.delete("/sessions/{session_id}/waitlist", response_model=WaitlistLeaveResponse)
def leave_waitlist(
    session_id: str,
    service: WaitlistService = Depends(deps.get_waitlist_service),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Leave waitlist voluntarily.

    **Errors**:
    - 401: Missing or invalid token
    - 404: Not on waitlist
    """
    service.leave(session_id, current_user.user_id)
    return WaitlistLeaveResponse(message="Removed from waitlist")


@router.get("/sessions/{session_id}/waitlist", response_model=WaitlistInfoResponse)
def get_waitlist(
    session_id: str,
    service: WaitlistService = Depends(deps.get_waitlist_service),
    current_user: Optional[TokenPayload] = Depends(deps.get_current_user_optional),
):
    """
    Waitlist for a session in queue order. Anonymous callers get no
    ``userPosition``.
    """
    view = service.get_waitlist(
        session_id, current_user.user_id if current_user else None
    )
    return WaitlistInfoResponse(
        count=view.count,
        userPosition=view.user_position,
        waitlist=[
            WaitlistPositionEntry(
                position=index,
                user_id=entry.user_id,
                joined_at=entry.created_at,
                notified=entry.notified,
            )
            for index, entry in enumerate(view.entries, start=1)
        ],
    )
