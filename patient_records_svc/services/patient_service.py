"""
Service layer for patient operations.

This service contains business logic for patient management
and orchestrates calls to repositories.

Architecture:
    API Layer (routers) → PatientService → PatientRepository → Database

Dependency Injection:
    PatientService receives its repository via constructor injection.
    Use core.dependencies.get_patient_service() in routers with Depends().

Rules enforced here:
    - Birth date must lie in [1880-01-01, now + 1 year)
    - Pension numbers are stored digits-only and are unique across patients
    - Edit replaces every mutable field; the id never changes
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from core.datetime_utils import utc_now
from core.exceptions import (
    DuplicatePensionNumberError,
    InvalidBirthDateError,
    PatientBindingError,
    PatientNotFoundError,
)
from models import Patient
from repositories import PatientRepository
from schemas import PatientDeleteResult, PatientForm
from services.validators import normalize_pension_number, validate_birth_date

logger = logging.getLogger(__name__)

PATIENT_ADDED_MESSAGE = "Patient added successfully"
PATIENT_UPDATED_MESSAGE = "Patient updated successfully"
PATIENT_DELETED_MESSAGE = "Patient deleted successfully"
DUPLICATE_PENSION_MESSAGE = "A patient with this pension number already exists"


class PatientService:
    """
    Service layer for patient operations.

    Handles validation, uniqueness checks and coordination with the
    repository layer. Failures are raised as domain exceptions from
    core.exceptions; routers decide which view each one maps to.
    """

    def __init__(
        self,
        patient_repository: PatientRepository,
        clock: Callable[[], datetime] = utc_now
    ):
        """
        Initialize the patient service.

        Args:
            patient_repository: PatientRepository bound to the request's session.
                               Injected via core.dependencies.get_patient_service().
            clock: Source of the current moment for birth date checks.
        """
        self._repo = patient_repository
        self._clock = clock

    def add_patient(self, form: Optional[PatientForm]) -> Patient:
        """
        Add a new patient.

        Args:
            form: Bound form data, or None if nothing could be bound.

        Returns:
            Patient: The created patient with its assigned id.

        Raises:
            PatientBindingError: If no patient data was submitted.
            InvalidBirthDateError: If the birth date is out of range.
            DuplicatePensionNumberError: If the pension number is taken.
        """
        if form is None:
            logger.error("Patient data could not be bound while adding a patient")
            raise PatientBindingError(detail="Patient data could not be bound while adding a patient")

        candidate = form.to_patient()
        try:
            validate_birth_date(candidate.birth_date, self._clock())
        except InvalidBirthDateError:
            logger.error(f"Rejected new patient: invalid birth date {candidate.birth_date}")
            raise

        candidate.pension_number = normalize_pension_number(candidate.pension_number)

        if self._repo.find_by_pension_number(candidate.pension_number) is not None:
            logger.error(f"Rejected new patient: pension number {candidate.pension_number} already exists")
            raise DuplicatePensionNumberError(
                detail=DUPLICATE_PENSION_MESSAGE,
                pension_number=candidate.pension_number
            )

        created = self._repo.insert(candidate)
        if created is None:
            # Lost a race with a concurrent insert of the same number
            logger.error(f"Rejected new patient: pension number {candidate.pension_number} already exists")
            raise DuplicatePensionNumberError(
                detail=DUPLICATE_PENSION_MESSAGE,
                pension_number=candidate.pension_number
            )

        logger.info(
            f"Patient added, pension number {created.pension_number}",
            extra={"patient_id": created.patient_id}
        )
        return created

    def get_patient(self, patient_id: int) -> Patient:
        """
        Get a patient with consultations for the detail page.

        Raises:
            PatientNotFoundError: If no patient has this id.
        """
        patient = self._repo.find_by_id_with_consultations(patient_id)
        if patient is None:
            logger.error(f"Patient page requested for missing patient id = {patient_id}")
            raise PatientNotFoundError(patient_id=patient_id)

        logger.info(
            f"Patient id = {patient_id} retrieved",
            extra={"consultations": len(patient.consultations)}
        )
        return patient

    def get_patient_for_edit(self, patient_id: int) -> Patient:
        """
        Get a patient to pre-fill the edit form.

        Raises:
            PatientNotFoundError: If no patient has this id.
        """
        patient = self._repo.find_by_id(patient_id)
        if patient is None:
            logger.error(f"Edit form requested for missing patient id = {patient_id}")
            raise PatientNotFoundError(patient_id=patient_id)

        logger.info(f"Edit form opened for patient id = {patient_id}")
        return patient

    def search_patients(
        self,
        name: Optional[str] = None,
        pension: Optional[str] = None
    ) -> List[Patient]:
        """
        Search patients by name substring and/or pension number prefix.

        Empty filters are ignored, so no filters returns every patient.
        """
        name = (name or "").strip()
        pension = (pension or "").strip()

        patients = self._repo.find_by_name_or_pension_prefix(name=name, pension=pension)
        logger.info(
            f"Patient search returned {len(patients)} patient(s)",
            extra={"name_filter": name, "pension_filter": pension}
        )
        return patients

    def update_patient(self, patient_id: int, form: Optional[PatientForm]) -> Patient:
        """
        Replace every mutable field of an existing patient.

        Args:
            patient_id: Id of the patient to edit.
            form: Bound form data, or None if nothing could be bound.

        Returns:
            Patient: The updated patient.

        Raises:
            PatientBindingError: If no patient data was submitted.
            PatientNotFoundError: If no patient has this id.
            InvalidBirthDateError: If the birth date is out of range.
            DuplicatePensionNumberError: If another patient has the pension number.
        """
        if form is None:
            logger.error(f"Patient data could not be bound while editing patient id = {patient_id}")
            raise PatientBindingError(
                detail=f"Patient data could not be bound while editing patient id = {patient_id}",
                patient_id=patient_id
            )

        if self._repo.find_by_id(patient_id) is None:
            logger.error(f"Edit submitted for missing patient id = {patient_id}")
            raise PatientNotFoundError(patient_id=patient_id)

        updated = form.to_patient(patient_id=patient_id)
        try:
            validate_birth_date(updated.birth_date, self._clock())
        except InvalidBirthDateError:
            logger.error(f"Rejected edit of patient id = {patient_id}: invalid birth date {updated.birth_date}")
            raise

        updated.pension_number = normalize_pension_number(updated.pension_number)

        holder = self._repo.find_by_pension_number(updated.pension_number)
        if holder is not None and holder.patient_id != patient_id:
            logger.warning(
                f"Rejected edit of patient id = {patient_id}: "
                f"pension number {updated.pension_number} belongs to another patient"
            )
            raise DuplicatePensionNumberError(
                detail=DUPLICATE_PENSION_MESSAGE,
                pension_number=updated.pension_number
            )

        saved = self._repo.update(updated)
        if saved is None:
            logger.warning(
                f"Rejected edit of patient id = {patient_id}: "
                f"pension number {updated.pension_number} belongs to another patient"
            )
            raise DuplicatePensionNumberError(
                detail=DUPLICATE_PENSION_MESSAGE,
                pension_number=updated.pension_number
            )

        logger.info(f"Patient id = {patient_id} updated")
        return saved

    def delete_patient(self, patient_id: int) -> PatientDeleteResult:
        """
        Hard-delete a patient.

        Returns:
            PatientDeleteResult: success "true" when removed, "false" when
                the id does not exist.
        """
        if not self._repo.delete(patient_id):
            message = f"Patient with id = {patient_id} was not found in the database"
            logger.error(f"Delete requested for missing patient id = {patient_id}")
            return PatientDeleteResult(success="false", message=message)

        logger.info(f"Patient id = {patient_id} deleted")
        return PatientDeleteResult(success="true", message=PATIENT_DELETED_MESSAGE)
