"""
Domain model for consultations.

Consultations belong to a separate subsystem; this service only reads them
to show a patient's history.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from core.datetime_utils import from_db_datetime


@dataclass
class Consultation:
    """A single consultation attached to a patient."""

    consultation_id: int
    patient_id: int
    date: Optional[datetime]
    symptoms: str = ""
    diagnosis: str = ""
    recommendations: str = ""

    @classmethod
    def from_row(cls, row: Any) -> 'Consultation':
        return cls(
            consultation_id=row["consultation_id"],
            patient_id=row["patient_id"],
            date=from_db_datetime(row["date"]),
            symptoms=row["symptoms"] or "",
            diagnosis=row["diagnosis"] or "",
            recommendations=row["recommendations"] or "",
        )
