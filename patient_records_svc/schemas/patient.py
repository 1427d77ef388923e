"""
Pydantic schemas for patient-related request binding and responses.
"""
from datetime import date
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import Patient


class PatientForm(BaseModel):
    """Schema for patient data submitted from the add and edit forms.

    Every field is optional so that an edit replaces the whole record:
    text fields left out become "" and a missing birth date becomes None.
    Range and uniqueness rules are enforced by PatientService, not here.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "first_name": "Ivan",
                "last_name": "Petrov",
                "patronymic": "Sergeevich",
                "birth_date": "1985-04-12",
                "pension_number": "123-456-789 01"
            }
        },
    )

    first_name: str = Field(default="", description="First name")
    last_name: str = Field(default="", description="Last name")
    patronymic: str = Field(default="", description="Patronymic")
    birth_date: Optional[date] = Field(default=None, description="Birth date (YYYY-MM-DD)")
    pension_number: str = Field(
        default="",
        description="Pension insurance number; separators are stripped before storage",
    )

    @field_validator("first_name", "last_name", "patronymic", "pension_number", mode="before")
    @classmethod
    def none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("birth_date", mode="before")
    @classmethod
    def blank_date_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_form_data(cls, data: Mapping[str, Any]) -> Optional["PatientForm"]:
        """
        Bind submitted form data.

        Returns:
            PatientForm, or None when none of the patient fields were submitted.

        Raises:
            pydantic.ValidationError: If a submitted value cannot be coerced.
        """
        values = {name: data[name] for name in cls.model_fields if name in data}
        if not values:
            return None
        return cls.model_validate(values)

    def to_patient(self, patient_id: Optional[int] = None) -> Patient:
        """Build a domain Patient from the submitted values."""
        return Patient(
            patient_id=patient_id,
            first_name=self.first_name,
            last_name=self.last_name,
            patronymic=self.patronymic,
            birth_date=self.birth_date,
            pension_number=self.pension_number,
        )


class PatientDeleteResult(BaseModel):
    """Schema for the delete endpoint response.

    `success` is the string "true" or "false" for compatibility with the
    page script that calls it.
    """
    success: str = Field(..., description='"true" or "false"', examples=["true"])
    message: str = Field(..., description="Human-readable outcome", examples=["Patient deleted successfully"])
