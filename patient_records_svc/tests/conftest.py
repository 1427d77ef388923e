"""
Shared pytest fixtures for service and API tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. Scoped Sessions: Repository/service tests run inside one Database.session()
3. DI Override: The test app swaps get_database via app.dependency_overrides,
   so every request opens its own session on the temporary database

Fixture Hierarchy:
    temp_db → db_session → patient_repo → patient_service
    temp_db → test_app → client
"""
import os
import tempfile
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from repositories import Database, PatientRepository
from services import PatientService
from schemas import PatientForm
from core import dependencies as deps
from core.exceptions import setup_exception_handlers

# Fixed "current moment" for birth date range checks
FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    This fixture creates a fresh SQLite database in a temp file,
    ensuring complete isolation between tests.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    # Cleanup, including WAL side files
    for path in (db_path, f"{db_path}-wal", f"{db_path}-shm"):
        if os.path.exists(path):
            os.unlink(path)


@pytest.fixture
def db_session(temp_db):
    """Open one scoped session on the test database for the whole test."""
    with temp_db.session() as conn:
        yield conn


@pytest.fixture
def patient_repo(db_session):
    """Create a PatientRepository on the test session."""
    return PatientRepository(conn=db_session)


@pytest.fixture
def patient_service(patient_repo):
    """Create a PatientService with the test repository and a fixed clock."""
    return PatientService(patient_repository=patient_repo, clock=lambda: FIXED_NOW)


@pytest.fixture
def make_form():
    """Build a valid PatientForm, overriding any field by keyword."""
    def _make_form(**overrides) -> PatientForm:
        values = {
            "first_name": "Ivan",
            "last_name": "Petrov",
            "patronymic": "Sergeevich",
            "birth_date": date(1985, 4, 12),
            "pension_number": "123-456-789 01",
        }
        values.update(overrides)
        return PatientForm(**values)
    return _make_form


@pytest.fixture
def add_consultation():
    """Insert a consultation row the way the consultations subsystem would."""
    def _add_consultation(
        conn,
        patient_id: int,
        when: datetime,
        symptoms: str = "Headache",
        diagnosis: str = "Migraine",
        recommendations: Optional[str] = "Rest"
    ) -> int:
        cursor = conn.execute(
            """
            INSERT INTO consultations (patient_id, date, symptoms, diagnosis, recommendations)
            VALUES (?, ?, ?, ?, ?)
            """,
            (patient_id, when.isoformat(), symptoms, diagnosis, recommendations or "")
        )
        return cursor.lastrowid
    return _add_consultation


@pytest.fixture
def test_app(temp_db):
    """
    Create a FastAPI test app with dependency overrides.

    - Uses the real routers (testing actual endpoint code)
    - Injects the test database via dependency_overrides; sessions,
      repositories and services are built per request as in production
    - Registers exception handlers for proper error page testing
    """
    from api.routers import health_router, home_router, patients_router

    app = FastAPI(title="Patient Records Service Test")

    setup_exception_handlers(app, deps.get_presenter())

    app.dependency_overrides[deps.get_database] = lambda: temp_db

    app.include_router(health_router)
    app.include_router(home_router)
    app.include_router(patients_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the app."""
    return TestClient(test_app)
