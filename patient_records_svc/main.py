"""
FastAPI application entry point for Patient Records Service.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request logging with request id propagation
- Dependency Injection: Services, repositories and a per-request SQLite
  session injected via Depends()
- Exception Handling: Domain errors rendered as the generic error page
- Server-side views: Jinja2 templates rendered by the Presenter
- Lifespan Management: Database initialization at startup

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware                                                 │
    │    └── LoggingMiddleware  - Request logging & request id    │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py     - /health, /ready                      │
    │    ├── home.py       - / landing page                       │
    │    └── patients.py   - /patient-management/patients         │
    ├─────────────────────────────────────────────────────────────┤
    │  Presenter (api/presenter.py) - views, partials, redirects  │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    └── PatientService     - Patient business rules          │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories (repositories/)   ← Injected into Services    │
    │    └── PatientRepository        - Patient data access       │
    ├─────────────────────────────────────────────────────────────┤
    │  Session (one sqlite3 connection per request)               │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
import uvicorn

from core.config import settings, SERVER_HOST, SERVER_PORT, SERVER_RELOAD
from core.dependencies import get_database, get_presenter
from core.exceptions import setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import health_router, home_router, patients_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup:
        - Configures structured logging
        - Creates the data directory and initializes the database schema

    Shutdown:
        - Logs shutdown message; connections are per request and already closed
    """
    setup_logging(level=settings.log_level, json_format=settings.log_format == "json")

    logger = logging.getLogger(__name__)
    logger.info("Starting Patient Records Service...")

    settings.ensure_directories()
    db = get_database()
    logger.info(
        "Database initialized",
        extra={"db_path": db.db_path}
    )

    yield

    logger.info("Patient Records Service shutting down...")


app = FastAPI(
    title="Patient Records Service",
    description="Patient records management: add, view, search, edit and delete patients.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Domain errors not handled by a router become the generic error page
setup_exception_handlers(app, get_presenter())

app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(home_router)
app.include_router(patients_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
        reload=SERVER_RELOAD
    )
