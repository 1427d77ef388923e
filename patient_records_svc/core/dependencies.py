"""
FastAPI Dependency Injection configuration for Patient Records Service.

This module provides the dependency injection (DI) infrastructure:
- One Database instance per process
- One SQLite connection per request (get_session), closed when the
  request finishes; repository writes commit before the response is built
- Repositories and services built per request on that connection

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (Business Logic)
         ↓ Depends()
    Repository Layer (Data Access)
         ↓ Depends()
    Session (sqlite3 connection scoped to the request)
         ↓ Depends()
    Database

Usage in Routers:
    from core.dependencies import get_patient_service

    @router.get("/{patient_id}")
    async def get_patient(
        patient_id: int,
        patient_service: PatientService = Depends(get_patient_service)
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_database] = lambda: test_database
"""
import logging
import sqlite3
from functools import lru_cache
from typing import Iterator, Optional

from fastapi import Depends

from api.presenter import Presenter
from core.config import settings
from repositories import Database, PatientRepository
from services import PatientService

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCIES
# =============================================================================

_database_instance: Optional[Database] = None


def get_database() -> Database:
    """
    Get the database instance (created on first use).

    Returns:
        Database: The configured database instance.
    """
    global _database_instance

    if _database_instance is None:
        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.patient_records_db_busy_timeout
        )
        logger.info("Database initialized successfully")

    return _database_instance


def get_session(db: Database = Depends(get_database)) -> Iterator[sqlite3.Connection]:
    """
    Yield a connection scoped to the current request.

    Repository writes commit as they happen. Anything left uncommitted is
    rolled back if an exception escapes the endpoint, and the connection is
    closed in every case.
    """
    with db.session() as conn:
        yield conn


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_patient_repository(conn: sqlite3.Connection = Depends(get_session)) -> PatientRepository:
    """
    Get a PatientRepository bound to the request's session.

    Returns:
        PatientRepository: Repository for patient CRUD operations.
    """
    return PatientRepository(conn=conn)


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_patient_service(
    patient_repo: PatientRepository = Depends(get_patient_repository)
) -> PatientService:
    """
    Get a PatientService instance with repository injected.

    Returns:
        PatientService: Service for patient operations.
    """
    return PatientService(patient_repository=patient_repo)


# =============================================================================
# PRESENTATION DEPENDENCIES
# =============================================================================

@lru_cache
def get_presenter() -> Presenter:
    """
    Get the shared Presenter that renders views from the templates directory.

    Returns:
        Presenter: View renderer.
    """
    return Presenter(templates_dir=settings.patient_records_templates_dir)
