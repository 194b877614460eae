# session_attendance/schemas/error.py
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    detail: str
    code: str
