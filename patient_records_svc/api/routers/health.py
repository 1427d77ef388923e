"""
Health and readiness endpoints for operational visibility.

This module provides:
- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (can the database be reached?)

No authentication, machine-readable JSON responses.
"""
import logging
import sqlite3
import time
from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from core.datetime_utils import utc_now
from core.dependencies import get_database
from repositories import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])

SERVICE_VERSION = "1.0.0"


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str  # "ok" or "unavailable"
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready" or "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


def _timestamp() -> str:
    return utc_now().strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# HEALTH ENDPOINT (LIVENESS)
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application is running. Does not touch the database."
)
async def health_check() -> HealthResponse:
    """Liveness probe - always 200 while the process serves requests."""
    return HealthResponse(status="healthy", version=SERVICE_VERSION, timestamp=_timestamp())


# =============================================================================
# READINESS ENDPOINT
# =============================================================================

def check_database(db: Database) -> DependencyStatus:
    """
    Check SQLite database connectivity with a trivial query.

    Returns:
        DependencyStatus: "ok" with latency, or "unavailable" with the error type.
    """
    start = time.perf_counter()
    try:
        with db.session() as conn:
            conn.execute("SELECT 1 FROM patients LIMIT 1")
    except sqlite3.Error as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Database readiness check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="database",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=f"Connection failed: {type(e).__name__}"
        )

    latency_ms = (time.perf_counter() - start) * 1000
    return DependencyStatus(
        name="database",
        status="ok",
        latency_ms=round(latency_ms, 2),
        message="SQLite connection healthy"
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Check if the database is reachable. Returns 503 if not."
)
async def readiness_check(
    response: Response,
    db: Database = Depends(get_database)
) -> ReadyResponse:
    """Readiness probe - 200 when the database answers, 503 otherwise."""
    db_status = check_database(db)

    if db_status.status == "ok":
        overall = "ready"
    else:
        overall = "not_ready"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadyResponse(status=overall, dependencies=[db_status], timestamp=_timestamp())
