"""
Patients router - patient management pages.

This router serves the add/detail/edit pages, the search fragment and the
delete endpoint used by the detail page's script.

Architecture:
    HTTP Request → Router (this file) → PatientService → PatientRepository → Database
                         ↓
                     Presenter (views, partials, redirects)

Error mapping:
    - PatientValidationError → the submitted form is re-rendered with the
      field error (handled here, the user's input is kept)
    - PatientBindingError / PatientNotFoundError → generic error page
      (handled by core.exceptions.setup_exception_handlers)
    - Delete never renders a page; it always answers with JSON

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from api.presenter import Presenter
from core.dependencies import get_patient_service, get_presenter
from core.exceptions import PatientBindingError, PatientValidationError
from schemas import PatientDeleteResult, PatientForm
from services import PatientService
from services.patient_service import PATIENT_ADDED_MESSAGE, PATIENT_UPDATED_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/patient-management/patients",
    tags=["Patients"],
)


async def bind_patient_form(request: Request) -> Optional[PatientForm]:
    """
    Bind the request's form body to a PatientForm.

    Returns:
        PatientForm, or None if the body carried no patient fields.

    Raises:
        PatientBindingError: If a submitted value cannot be coerced.
    """
    form_data = await request.form()
    try:
        return PatientForm.from_form_data(form_data)
    except ValidationError as e:
        fields = sorted({str(error["loc"][0]) for error in e.errors() if error.get("loc")})
        logger.error(
            "Patient form could not be bound",
            extra={"fields": fields, "path": request.url.path}
        )
        raise PatientBindingError(
            detail=f"Patient data could not be bound: invalid {', '.join(fields)}",
            fields=fields
        )


# =============================================================================
# ADD
# =============================================================================

@router.get("", name="add_patient_form", summary="Add-patient form")
async def add_patient_form(
    request: Request,
    presenter: Presenter = Depends(get_presenter)
):
    """Render the empty add-patient form."""
    return presenter.render_view(request, "patient/add.html")


@router.post("", name="add_patient", summary="Create a patient")
async def add_patient(
    request: Request,
    patient_service: PatientService = Depends(get_patient_service),
    presenter: Presenter = Depends(get_presenter)
):
    """
    Create a patient from the submitted form.

    Redirects to the landing page on success; re-renders the form with the
    submitted values and a field error if a rule is violated.
    """
    form = await bind_patient_form(request)
    try:
        patient_service.add_patient(form)
    except PatientValidationError as e:
        return presenter.render_view(
            request, "patient/add.html",
            model=form, status_code=e.status_code, errors=e.errors
        )
    return presenter.redirect(request.app.url_path_for("index"), message=PATIENT_ADDED_MESSAGE)


# =============================================================================
# SEARCH
# =============================================================================

@router.get("/search", name="search_patients", summary="Search patients (query string)")
async def search_patients(
    request: Request,
    name: str = Query("", description="Substring of 'first last patronymic'"),
    pension: str = Query("", description="Pension number prefix"),
    patient_service: PatientService = Depends(get_patient_service),
    presenter: Presenter = Depends(get_presenter)
):
    """Render the list fragment for patients matching the filters (empty = all)."""
    patients = patient_service.search_patients(name=name, pension=pension)
    return presenter.render_partial(request, "patient/_list.html", model=patients)


# =============================================================================
# DETAIL / EDIT / DELETE
# =============================================================================

@router.get("/{patient_id:int}", name="get_patient", summary="Patient detail page")
async def get_patient(
    request: Request,
    patient_id: int,
    message: str = Query("", description="Status message from a previous action"),
    patient_service: PatientService = Depends(get_patient_service),
    presenter: Presenter = Depends(get_presenter)
):
    """Render a patient with their consultations."""
    patient = patient_service.get_patient(patient_id)
    return presenter.render_view(request, "patient/get.html", model=patient, message=message)


@router.get("/{patient_id:int}/edit", name="edit_patient_form", summary="Edit-patient form")
async def edit_patient_form(
    request: Request,
    patient_id: int,
    patient_service: PatientService = Depends(get_patient_service),
    presenter: Presenter = Depends(get_presenter)
):
    """Render the edit form pre-filled with the stored values."""
    patient = patient_service.get_patient_for_edit(patient_id)
    return presenter.render_view(request, "patient/edit.html", model=patient, patient_id=patient_id)


@router.post("/{patient_id:int}", name="edit_patient", summary="Apply an edit")
async def edit_patient(
    request: Request,
    patient_id: int,
    patient_service: PatientService = Depends(get_patient_service),
    presenter: Presenter = Depends(get_presenter)
):
    """
    Replace the patient's fields with the submitted form.

    Redirects to the detail page on success; re-renders the edit form with
    the submitted values and a field error if a rule is violated.
    """
    form = await bind_patient_form(request)
    try:
        patient_service.update_patient(patient_id, form)
    except PatientValidationError as e:
        return presenter.render_view(
            request, "patient/edit.html",
            model=form, status_code=e.status_code, errors=e.errors, patient_id=patient_id
        )
    return presenter.redirect(
        request.app.url_path_for("get_patient", patient_id=patient_id),
        message=PATIENT_UPDATED_MESSAGE
    )


@router.delete(
    "/{patient_id:int}",
    name="delete_patient",
    response_model=PatientDeleteResult,
    summary="Delete a patient",
    description='Hard-deletes the patient. Always answers 200 with success "true" or "false".'
)
async def delete_patient(
    patient_id: int,
    patient_service: PatientService = Depends(get_patient_service)
):
    """Delete a patient and report the outcome as JSON."""
    return patient_service.delete_patient(patient_id)


# =============================================================================
# SEARCH (PATH VARIANT)
# =============================================================================
# Registered last so /{patient_id}/edit takes precedence.

@router.get("/{name}/{pension}", name="search_patients_by_path", summary="Search patients (path)")
async def search_patients_by_path(
    request: Request,
    name: str,
    pension: str,
    patient_service: PatientService = Depends(get_patient_service),
    presenter: Presenter = Depends(get_presenter)
):
    """Render the list fragment for patients matching both path filters."""
    patients = patient_service.search_patients(name=name, pension=pension)
    return presenter.render_partial(request, "patient/_list.html", model=patients)
