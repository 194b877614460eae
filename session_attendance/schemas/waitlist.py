# session_attendance/schemas/waitlist.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class WaitlistEntryResponse(BaseModel):
    id: int
    session_id: str
    user_id: str
    position: Optional[int] = None
    notified: bool
    notified_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class WaitlistJoinResponse(BaseModel):
    success: bool = True
    message: str
    position: int
    waitlist: WaitlistEntryResponse


class WaitlistLeaveResponse(BaseModel):
    success: bool = True
    message: str


class WaitlistPositionEntry(BaseModel):
    position: int
    user_id: str
    joined_at: datetime
    notified: bool


class WaitlistInfoResponse(BaseModel):
    count: int
    userPosition: Optional[int] = None
    waitlist: List[WaitlistPositionEntry]
