"""
Core module for application configuration, logging, and shared utilities.

This module provides:
- Settings: Application configuration via pydantic-settings
- Exceptions: Domain-specific exception classes with HTTP status codes
- Datetime utilities: UTC-first date handling

Dependency injection functions live in core.dependencies and are imported
from there directly, since they depend on the repository and service layers.
"""
from core.config import settings, Settings

from core.exceptions import (
    PatientRecordsError,
    PatientBindingError,
    PatientNotFoundError,
    PatientValidationError,
    InvalidBirthDateError,
    DuplicatePensionNumberError,
    setup_exception_handlers,
)

from core.datetime_utils import (
    utc_now,
    to_utc,
    add_years,
    start_of_day_utc,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Exceptions
    "PatientRecordsError",
    "PatientBindingError",
    "PatientNotFoundError",
    "PatientValidationError",
    "InvalidBirthDateError",
    "DuplicatePensionNumberError",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "add_years",
    "start_of_day_utc",
]
