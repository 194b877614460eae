# session_attendance/api/v1/api.py

from fastapi import APIRouter

from session_attendance.api.v1.endpoints import attendance, session_attendance, waitlist

# Main router for the v1 API.
api_router = APIRouter()

api_router.include_router(attendance.router)
api_router.include_router(waitlist.router)
api_router.include_router(session_attendance.router)
