"""
Domain model for patients.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional

from core.datetime_utils import from_db_date
from models.consultation import Consultation


@dataclass
class Patient:
    """Model representing a patient in the system."""

    patient_id: Optional[int]
    first_name: str = ""
    last_name: str = ""
    patronymic: str = ""
    birth_date: Optional[date] = None
    pension_number: str = ""
    consultations: List[Consultation] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Any) -> 'Patient':
        """
        Create a Patient from a database row.

        Args:
            row: sqlite3.Row (or mapping) with the patients table columns.

        Returns:
            Patient instance without consultations loaded.
        """
        return cls(
            patient_id=row["patient_id"],
            first_name=row["first_name"] or "",
            last_name=row["last_name"] or "",
            patronymic=row["patronymic"] or "",
            birth_date=from_db_date(row["birth_date"]),
            pension_number=row["pension_number"] or "",
        )
