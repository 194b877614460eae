# tests/conftest.py
import os

# Settings are read at import time; point the default engine at a throwaway
# SQLite URL so importing the app never needs a PostgreSQL driver or server.
os.environ.setdefault("ENV", "local")
os.environ.setdefault("DATABASE_URL_LOCAL", "sqlite:///./unused-default.db")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from session_attendance.api import deps
from session_attendance.db.session import build_engine
from session_attendance.main import app
from session_attendance.models import Base
from session_attendance.services.attendance import AttendanceService
from session_attendance.services.waitlist import WaitlistService


# --- Test Database Setup ---
@pytest.fixture(scope="function")
def engine(tmp_path):
    """A fresh SQLite file database per test, schema created from the models."""
    engine = build_engine(f"sqlite:///{tmp_path / 'attendance.db'}", max_wait_seconds=10)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )


@pytest.fixture(scope="function")
def attendance_service(session_factory) -> AttendanceService:
    return AttendanceService(session_factory)


@pytest.fixture(scope="function")
def waitlist_service(session_factory) -> WaitlistService:
    return WaitlistService(session_factory)


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def client(session_factory):
    """
    TestClient wired to the per-test database. Authentication is real:
    build headers with tests.utils.auth.auth_headers().
    """
    app.dependency_overrides[deps.get_session_factory] = lambda: session_factory

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
