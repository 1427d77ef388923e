"""
Tests for PatientService business rules.

Uses a real repository on a temporary database and a fixed clock
(2024-06-15 12:00 UTC), so the accepted birth date range is
[1880-01-01, 2025-06-15 12:00).
"""
from datetime import date, datetime, timezone

import pytest

from core.exceptions import (
    DuplicatePensionNumberError,
    InvalidBirthDateError,
    PatientBindingError,
    PatientNotFoundError,
)
from repositories import PatientRepository
from services import PatientService
from services.patient_service import (
    DUPLICATE_PENSION_MESSAGE,
    PATIENT_DELETED_MESSAGE,
)

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# ADD
# =============================================================================

class TestAddPatient:
    """Tests for PatientService.add_patient."""

    def test_add_stores_normalized_pension_number(self, patient_service, make_form):
        created = patient_service.add_patient(make_form(pension_number="123-456-789 01"))

        assert created.patient_id is not None
        assert created.pension_number == "12345678901"
        assert created.first_name == "Ivan"
        assert created.birth_date == date(1985, 4, 12)

    def test_add_without_bound_data_raises_binding_error(self, patient_service):
        with pytest.raises(PatientBindingError) as exc_info:
            patient_service.add_patient(None)

        assert exc_info.value.status_code == 400
        assert patient_service.search_patients() == []

    def test_add_with_out_of_range_birth_date_is_rejected(self, patient_service, make_form):
        with pytest.raises(InvalidBirthDateError) as exc_info:
            patient_service.add_patient(make_form(birth_date=date(1700, 1, 1)))

        assert exc_info.value.errors.keys() == {"birth_date"}
        assert patient_service.search_patients() == []

    def test_add_without_birth_date_is_rejected(self, patient_service, make_form):
        with pytest.raises(InvalidBirthDateError):
            patient_service.add_patient(make_form(birth_date=None))

    def test_add_accepts_birth_date_up_to_a_year_ahead(self, patient_service, make_form):
        created = patient_service.add_patient(make_form(birth_date=date(2025, 6, 15)))
        assert created.birth_date == date(2025, 6, 15)

    def test_add_duplicate_pension_number_after_normalization(self, patient_service, make_form):
        patient_service.add_patient(make_form(pension_number="123-456-789"))

        with pytest.raises(DuplicatePensionNumberError) as exc_info:
            patient_service.add_patient(make_form(first_name="Anna", pension_number="123456789"))

        assert exc_info.value.detail == DUPLICATE_PENSION_MESSAGE
        assert exc_info.value.errors == {"pension_number": DUPLICATE_PENSION_MESSAGE}
        assert len(patient_service.search_patients()) == 1

    def test_add_losing_insert_race_reports_duplicate(self, db_session, make_form):
        """A concurrent insert between the check and the write still yields a duplicate error."""

        class StaleLookupRepository(PatientRepository):
            def find_by_pension_number(self, pension_number):
                return None

        service = PatientService(StaleLookupRepository(db_session), clock=lambda: FIXED_NOW)
        service.add_patient(make_form(pension_number="555"))

        with pytest.raises(DuplicatePensionNumberError):
            service.add_patient(make_form(pension_number="5-5-5"))


# =============================================================================
# GET
# =============================================================================

class TestGetPatient:
    """Tests for get_patient and get_patient_for_edit."""

    def test_get_patient_includes_consultations(
        self, patient_service, make_form, db_session, add_consultation
    ):
        created = patient_service.add_patient(make_form())
        add_consultation(db_session, created.patient_id, datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc))

        patient = patient_service.get_patient(created.patient_id)

        assert patient.patient_id == created.patient_id
        assert len(patient.consultations) == 1
        assert patient.consultations[0].symptoms == "Headache"

    def test_get_missing_patient_raises_not_found(self, patient_service):
        with pytest.raises(PatientNotFoundError) as exc_info:
            patient_service.get_patient(42)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Patient with id = 42 was not found in the database"

    def test_get_for_edit_returns_patient(self, patient_service, make_form):
        created = patient_service.add_patient(make_form())

        patient = patient_service.get_patient_for_edit(created.patient_id)

        assert patient.last_name == "Petrov"
        assert patient.consultations == []

    def test_get_for_edit_missing_patient_raises_not_found(self, patient_service):
        with pytest.raises(PatientNotFoundError):
            patient_service.get_patient_for_edit(7)


# =============================================================================
# SEARCH
# =============================================================================

class TestSearchPatients:
    """Tests for search_patients."""

    def test_search_without_filters_returns_all(self, patient_service, make_form):
        patient_service.add_patient(make_form(pension_number="1"))
        patient_service.add_patient(make_form(pension_number="2"))

        assert len(patient_service.search_patients()) == 2
        assert len(patient_service.search_patients(name="  ", pension="")) == 2

    def test_search_by_name_and_pension(self, patient_service, make_form):
        patient_service.add_patient(make_form(last_name="Smith", pension_number="123-45"))
        patient_service.add_patient(make_form(last_name="Smith", pension_number="999"))

        results = patient_service.search_patients(name=" smith ", pension="123")

        assert [p.pension_number for p in results] == ["12345"]


# =============================================================================
# EDIT
# =============================================================================

class TestUpdatePatient:
    """Tests for PatientService.update_patient."""

    def test_update_replaces_all_fields_and_keeps_id(self, patient_service, make_form):
        created = patient_service.add_patient(make_form())

        updated = patient_service.update_patient(
            created.patient_id,
            make_form(first_name="Petr", patronymic="", pension_number="999-888")
        )

        assert updated.patient_id == created.patient_id
        assert updated.first_name == "Petr"
        assert updated.patronymic == ""
        assert updated.pension_number == "999888"

    def test_update_with_own_pension_number_is_allowed(self, patient_service, make_form):
        created = patient_service.add_patient(make_form(pension_number="123-456"))

        updated = patient_service.update_patient(
            created.patient_id,
            make_form(last_name="Sidorov", pension_number="123456")
        )

        assert updated.last_name == "Sidorov"
        assert updated.pension_number == "123456"

    def test_update_with_other_patients_pension_number_is_rejected(self, patient_service, make_form):
        first = patient_service.add_patient(make_form(pension_number="111"))
        second = patient_service.add_patient(make_form(pension_number="222"))

        with pytest.raises(DuplicatePensionNumberError):
            patient_service.update_patient(second.patient_id, make_form(pension_number="1-1-1"))

        assert patient_service.get_patient(second.patient_id).pension_number == "222"
        assert patient_service.get_patient(first.patient_id).pension_number == "111"

    def test_update_without_bound_data_raises_binding_error(self, patient_service, make_form):
        created = patient_service.add_patient(make_form())

        with pytest.raises(PatientBindingError):
            patient_service.update_patient(created.patient_id, None)

    def test_update_missing_patient_raises_not_found(self, patient_service, make_form):
        with pytest.raises(PatientNotFoundError):
            patient_service.update_patient(404, make_form())

    def test_update_with_invalid_birth_date_leaves_record_unchanged(self, patient_service, make_form):
        created = patient_service.add_patient(make_form())

        with pytest.raises(InvalidBirthDateError):
            patient_service.update_patient(
                created.patient_id,
                make_form(first_name="Changed", birth_date=date(2030, 1, 1))
            )

        assert patient_service.get_patient(created.patient_id).first_name == "Ivan"


# =============================================================================
# DELETE
# =============================================================================

class TestDeletePatient:
    """Tests for PatientService.delete_patient."""

    def test_delete_existing_patient(self, patient_service, make_form):
        created = patient_service.add_patient(make_form())

        result = patient_service.delete_patient(created.patient_id)

        assert result.success == "true"
        assert result.message == PATIENT_DELETED_MESSAGE
        with pytest.raises(PatientNotFoundError):
            patient_service.get_patient(created.patient_id)

    def test_delete_missing_patient_reports_failure(self, patient_service):
        result = patient_service.delete_patient(31)

        assert result.success == "false"
        assert result.message == "Patient with id = 31 was not found in the database"

    def test_deleted_pension_number_can_be_reused(self, patient_service, make_form):
        created = patient_service.add_patient(make_form(pension_number="777"))
        patient_service.delete_patient(created.patient_id)

        again = patient_service.add_patient(make_form(pension_number="777"))

        assert again.patient_id != created.patient_id
