"""
Tests for binding submitted form data to PatientForm.
"""
from datetime import date

import pytest
from pydantic import ValidationError

from schemas import PatientDeleteResult, PatientForm


def test_from_form_data_binds_and_strips():
    form = PatientForm.from_form_data({
        "first_name": "  Ivan ",
        "last_name": "Petrov",
        "birth_date": "1985-04-12",
        "pension_number": " 123-456 ",
    })

    assert form.first_name == "Ivan"
    assert form.birth_date == date(1985, 4, 12)
    assert form.pension_number == "123-456"


def test_from_form_data_missing_fields_default_to_empty():
    """An edit that leaves fields out clears them."""
    form = PatientForm.from_form_data({"last_name": "Petrov"})

    assert form.first_name == ""
    assert form.patronymic == ""
    assert form.pension_number == ""
    assert form.birth_date is None


def test_from_form_data_blank_birth_date_is_none():
    form = PatientForm.from_form_data({"first_name": "Ivan", "birth_date": "  "})
    assert form.birth_date is None


@pytest.mark.parametrize("data", [{}, {"unrelated": "value"}])
def test_from_form_data_without_patient_fields_returns_none(data):
    assert PatientForm.from_form_data(data) is None


def test_from_form_data_rejects_unparsable_date():
    with pytest.raises(ValidationError):
        PatientForm.from_form_data({"first_name": "Ivan", "birth_date": "12/04/85x"})


def test_to_patient_carries_id_and_values():
    form = PatientForm(first_name="Ivan", last_name="Petrov", pension_number="1-2-3")

    patient = form.to_patient(patient_id=5)

    assert patient.patient_id == 5
    assert patient.last_name == "Petrov"
    # normalization happens in the service
    assert patient.pension_number == "1-2-3"
    assert patient.consultations == []


def test_delete_result_serializes_success_as_string():
    result = PatientDeleteResult(success="true", message="Patient deleted successfully")
    assert result.model_dump() == {"success": "true", "message": "Patient deleted successfully"}


def test_from_form_data_does_not_limit_length():
    form = PatientForm.from_form_data({"last_name": "N" * 500, "pension_number": "1" * 80})

    assert len(form.last_name) == 500
    assert len(form.pension_number) == 80
