"""
Validation utilities for services.
"""
from services.validators.patient_validator import (
    normalize_pension_number,
    birth_date_bounds,
    is_valid_birth_date,
    validate_birth_date,
    MIN_BIRTH_DATE,
    MAX_BIRTH_DATE_YEARS_AHEAD,
)

__all__ = [
    "normalize_pension_number",
    "birth_date_bounds",
    "is_valid_birth_date",
    "validate_birth_date",
    "MIN_BIRTH_DATE",
    "MAX_BIRTH_DATE_YEARS_AHEAD",
]
