"""
Domain models for the patient records service.

This module contains internal domain models built from database rows.
"""
from models.consultation import Consultation
from models.patient import Patient

__all__ = ["Consultation", "Patient"]
