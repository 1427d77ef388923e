"""
Repository for patient database operations.

This module contains all database access for patient-related operations.

Architecture:
    PatientRepository is the data access layer for patients.
    It is built per request on the scoped connection provided by
    core.dependencies.get_session(), via core.dependencies.get_patient_repository().

All SQL is encapsulated in this repository - no SQL in service or API layers.
Each write commits before returning, so a change is durable before the
router builds its response.
"""
import sqlite3
import logging
from typing import Optional, List

from core.datetime_utils import to_db_date
from models import Consultation, Patient

logger = logging.getLogger(__name__)

PATIENT_COLUMNS = "patient_id, first_name, last_name, patronymic, birth_date, pension_number"

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class PatientRepository:
    """
    Repository for patient CRUD operations.

    This repository encapsulates all database operations for patients.
    It should be instantiated via core.dependencies.get_patient_repository().
    """

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize the patient repository.

        Args:
            conn: Open connection for the current unit of work.
                  Injected via core.dependencies.get_patient_repository().
        """
        self._conn = conn

    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        """
        Get a patient by id, without consultations.

        Returns:
            Optional[Patient]: The patient or None if not found.
        """
        row = self._conn.execute(
            f"SELECT {PATIENT_COLUMNS} FROM patients WHERE patient_id = ?",
            (patient_id,)
        ).fetchone()
        return Patient.from_row(row) if row else None

    def find_by_id_with_consultations(self, patient_id: int) -> Optional[Patient]:
        """
        Get a patient by id with consultations loaded, oldest first.

        Returns:
            Optional[Patient]: The patient or None if not found.
        """
        patient = self.find_by_id(patient_id)
        if patient is None:
            return None

        rows = self._conn.execute(
            """
            SELECT consultation_id, patient_id, date, symptoms, diagnosis, recommendations
            FROM consultations
            WHERE patient_id = ?
            ORDER BY date ASC, consultation_id ASC
            """,
            (patient_id,)
        ).fetchall()
        patient.consultations = [Consultation.from_row(row) for row in rows]
        return patient

    def find_by_pension_number(self, pension_number: str) -> Optional[Patient]:
        """
        Get the patient holding an exact (normalized) pension number.

        Returns:
            Optional[Patient]: The patient or None if the number is free.
        """
        row = self._conn.execute(
            f"SELECT {PATIENT_COLUMNS} FROM patients WHERE pension_number = ?",
            (pension_number,)
        ).fetchone()
        return Patient.from_row(row) if row else None

    def find_by_name_or_pension_prefix(
        self,
        name: Optional[str] = None,
        pension: Optional[str] = None
    ) -> List[Patient]:
        """
        Search patients by full name substring and/or pension number prefix.

        Each filter applies only when non-empty; both together are ANDed.
        With no filters the full patient set is returned.

        Args:
            name: Case-insensitive substring of "first last patronymic".
            pension: Prefix of the normalized pension number.

        Returns:
            List[Patient]: Matches ordered by last name, first name, id.
        """
        query = f"SELECT {PATIENT_COLUMNS} FROM patients WHERE 1=1"
        params: List[str] = []

        if name:
            query += (
                " AND casefold(first_name || ' ' || last_name || ' ' || patronymic)"
                f" LIKE casefold(?) ESCAPE '{LIKE_ESCAPE}'"
            )
            params.append(f"%{escape_like(name)}%")

        if pension:
            query += f" AND pension_number LIKE ? ESCAPE '{LIKE_ESCAPE}'"
            params.append(f"{escape_like(pension)}%")

        query += " ORDER BY last_name ASC, first_name ASC, patient_id ASC"

        rows = self._conn.execute(query, params).fetchall()
        return [Patient.from_row(row) for row in rows]

    def insert(self, patient: Patient) -> Optional[Patient]:
        """
        Insert a new patient and return it with the assigned id.

        Args:
            patient: Patient to store; its patient_id is ignored.

        Returns:
            Optional[Patient]: The stored patient, or None if the pension
                number is already taken (UNIQUE constraint violation).
        """
        try:
            cursor = self._conn.execute(
                """
                INSERT INTO patients (first_name, last_name, patronymic, birth_date, pension_number)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    patient.first_name,
                    patient.last_name,
                    patient.patronymic,
                    to_db_date(patient.birth_date),
                    patient.pension_number,
                )
            )
        except sqlite3.IntegrityError:
            logger.warning(
                "Insert rejected by pension number constraint",
                extra={"pension_number": patient.pension_number}
            )
            return None

        self._conn.commit()
        return self.find_by_id(cursor.lastrowid)

    def update(self, patient: Patient) -> Optional[Patient]:
        """
        Overwrite every mutable column of an existing patient.

        The id column is never written.

        Args:
            patient: Patient carrying the id to update and the new values.

        Returns:
            Optional[Patient]: The updated patient, or None if the pension
                number belongs to another patient (UNIQUE constraint violation).
        """
        try:
            self._conn.execute(
                """
                UPDATE patients
                SET first_name = ?, last_name = ?, patronymic = ?, birth_date = ?, pension_number = ?
                WHERE patient_id = ?
                """,
                (
                    patient.first_name,
                    patient.last_name,
                    patient.patronymic,
                    to_db_date(patient.birth_date),
                    patient.pension_number,
                    patient.patient_id,
                )
            )
        except sqlite3.IntegrityError:
            logger.warning(
                "Update rejected by pension number constraint",
                extra={"patient_id": patient.patient_id, "pension_number": patient.pension_number}
            )
            return None

        self._conn.commit()
        return self.find_by_id(patient.patient_id)

    def delete(self, patient_id: int) -> bool:
        """
        Hard-delete a patient; consultations cascade.

        Returns:
            bool: True if a row was removed.
        """
        cursor = self._conn.execute("DELETE FROM patients WHERE patient_id = ?", (patient_id,))
        self._conn.commit()
        return cursor.rowcount > 0
