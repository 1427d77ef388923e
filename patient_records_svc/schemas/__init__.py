"""
Pydantic schemas for request binding and response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.patient import PatientDeleteResult, PatientForm

__all__ = [
    "PatientDeleteResult",
    "PatientForm",
]
