import os

# in-memory SQLite instead of the PostgreSQL defaults, must be set before the app is imported
os.environ["SQLALCHEMY_URL"] = "sqlite://"
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from core.metrics import Metrics  # noqa: E402
from database.db import Base, SessionLocal, engine  # noqa: E402
from main import app  # noqa: E402
from repositories.attendance import AttendanceRepository  # noqa: E402
from repositories.teachers import TeacherRepository  # noqa: E402
from services.attendance_service import AttendanceService  # noqa: E402
from services.teacher_service import TeacherService  # noqa: E402


@pytest.fixture(autouse=True)
def clean_tables():
    """Fresh tables for every test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def test_metrics():
    return Metrics()


@pytest.fixture
def teacher_service(db_session, test_metrics):
    return TeacherService(TeacherRepository(db_session), test_metrics)


@pytest.fixture
def attendance_service(db_session, test_metrics):
    return AttendanceService(AttendanceRepository(db_session), TeacherRepository(db_session), test_metrics)


@pytest.fixture
def teacher(teacher_service):
    return teacher_service.create_teacher(
        {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "email": "ada@school.edu",
            "subject": "Mathematics",
            "phone": "555-0101",
        }
    )
