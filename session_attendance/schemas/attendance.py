# session_attendance/schemas/attendance.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from session_attendance.constants.attendance import AttendanceStatus


class AttendanceRequest(BaseModel):
    session_id: str = Field(..., min_length=1)


class AttendanceRecordResponse(BaseModel):
    id: str
    session_id: str
    user_id: str
    status: AttendanceStatus
    marked_at: datetime
    attended_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class JoinResponse(BaseModel):
    message: str
    attendance: AttendanceRecordResponse


class CancelResponse(BaseModel):
    message: str
    waitlistNotified: bool


class AttendeeMark(BaseModel):
    user_id: str = Field(..., min_length=1)
    attended: bool


class MarkAttendanceRequest(BaseModel):
    attendees: List[AttendeeMark] = Field(..., min_length=1)

    @field_validator("attendees")
    @classmethod
    def validate_unique_users(cls, v: List[AttendeeMark]) -> List[AttendeeMark]:
        """Each attendee may be marked once per request"""
        seen = set()
        for mark in v:
            if mark.user_id in seen:
                raise ValueError(f"Duplicate attendee: {mark.user_id}")
            seen.add(mark.user_id)
        return v


class AttendanceUpdate(BaseModel):
    user_id: str
    status: AttendanceStatus

    model_config = {"from_attributes": True}


class MarkAttendanceResponse(BaseModel):
    message: str
    updates: List[AttendanceUpdate]


class AttendanceRosterResponse(BaseModel):
    session_id: str
    session_date: datetime
    is_past: bool
    participants: List[AttendanceRecordResponse]
