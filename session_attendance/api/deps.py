# session_attendance/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import sessionmaker

from session_attendance.core.config import settings
from session_attendance.db.session import SessionLocal
from session_attendance.schemas.token import TokenPayload
from session_attendance.services.attendance import AttendanceService
from session_attendance.services.waitlist import WaitlistService


def get_session_factory() -> sessionmaker:
    """Factory the transactional services open their own sessions from."""
    return SessionLocal


def get_attendance_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> AttendanceService:
    return AttendanceService(session_factory)


def get_waitlist_service(
    session_factory: sessionmaker = Depends(get_session_factory),
) -> WaitlistService:
    return WaitlistService(session_factory)


# Tokens are issued by the identity service; `tokenUrl` is only used by the
# OpenAPI docs.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")
oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


def _decode(token: str) -> TokenPayload:
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=["HS256"])
    return TokenPayload(**payload)


def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenPayload:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        return _decode(token)
    except (JWTError, ValueError):
        # Catches any error from jose or Pydantic validation
        raise credentials_exception


def get_current_user_optional(
    token: str | None = Depends(oauth2_scheme_optional),
) -> TokenPayload | None:
    if token is None:
        return None
    try:
        return _decode(token)
    except (JWTError, ValueError):
        # Anonymous view for public endpoints
        return None
