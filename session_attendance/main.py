# session_attendance/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from session_attendance.api.errors import register_error_handlers
from session_attendance.api.v1.api import api_router
from session_attendance.core.config import settings
from session_attendance.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    logger.info("Session attendance service starting up...")
    yield
    logger.info("Session attendance service shutting down...")


app = FastAPI(
    title="Session Attendance Service",
    version="1.0.0",
    description="""
        Capacity-safe joining, cancelling and waitlisting for scheduled sports sessions.

        ## Features

        * **Join**: Serializable capacity check + insert, never overfills a session
        * **Cancel**: Frees the spot and notifies the next person on the waitlist
        * **Waitlist**: FIFO queue per session
        * **Attendance marking**: Hosts record attendees and no-shows

        ## Authentication

        Endpoints require JWT authentication via the `Authorization: Bearer <token>` header.

        Responses with status 503 are safe to retry with backoff.
        """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Session Attendance Service is running"}
