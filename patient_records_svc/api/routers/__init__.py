"""
API routers module.

This module contains all route definitions organized by domain.
"""
from api.routers.health import router as health_router
from api.routers.home import router as home_router
from api.routers.patients import router as patients_router

__all__ = ["health_router", "home_router", "patients_router"]
