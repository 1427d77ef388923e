"""
Shared exception classes and error handling for Patient Records Service.

This module provides:
- Custom exception hierarchy for domain-specific errors
- An exception handler that renders uncaught domain errors as the error page

Usage:
    from core.exceptions import PatientNotFoundError

    # In service layer - raise domain exceptions
    raise PatientNotFoundError(patient_id=42)

    # In FastAPI - register handlers via setup_exception_handlers(app, presenter)
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import Response

if TYPE_CHECKING:
    from api.presenter import Presenter

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASS
# =============================================================================

class PatientRecordsError(Exception):
    """
    Base exception for all Patient Records Service domain errors.

    Provides consistent error structure with status code and detail message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context for logs and error responses.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for responses and view models."""
        result = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# PATIENT EXCEPTIONS
# =============================================================================

class PatientBindingError(PatientRecordsError):
    """Raised when submitted patient data is missing or cannot be bound."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Patient data could not be bound from the request"


class PatientNotFoundError(PatientRecordsError):
    """Raised when a patient id is not present in the database."""

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Patient not found"

    def __init__(self, patient_id: Optional[int] = None, detail: Optional[str] = None, **kwargs: Any):
        if detail is None and patient_id is not None:
            detail = f"Patient with id = {patient_id} was not found in the database"
        super().__init__(detail=detail, patient_id=patient_id, **kwargs)


class PatientValidationError(PatientRecordsError):
    """
    Raised when a single patient field fails a business rule.

    Routers catch this to re-render the submitted form with the message
    attached to `field`.
    """

    status_code = 422  # Unprocessable Content
    detail = "Invalid patient data"
    field: str = ""

    def __init__(self, field: Optional[str] = None, detail: Optional[str] = None, **kwargs: Any):
        self.field = field or self.__class__.field
        super().__init__(detail=detail, field=self.field, **kwargs)

    @property
    def errors(self) -> Dict[str, str]:
        """Field name to message mapping used by the form views."""
        return {self.field: self.detail}


class InvalidBirthDateError(PatientValidationError):
    """Raised when a birth date lies outside the accepted range."""

    field = "birth_date"
    detail = "Birth date is outside the accepted range"


class DuplicatePensionNumberError(PatientValidationError):
    """Raised when another patient already has the same pension number."""

    field = "pension_number"
    detail = "A patient with this pension number already exists"


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def setup_exception_handlers(app: FastAPI, presenter: "Presenter") -> None:
    """
    Register exception handlers with the FastAPI application.

    Uncaught PatientRecordsError subclasses are rendered as the generic
    error view with the exception's status code. Anything else propagates
    to the framework's default handling.

    Args:
        app: The FastAPI application instance.
        presenter: Presenter used to render the error view.
    """

    async def patient_records_exception_handler(
        request: Request,
        exc: PatientRecordsError
    ) -> Response:
        logger.warning(
            f"PatientRecordsError: {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "path": request.url.path,
                "method": request.method,
                "error": exc.to_dict()
            }
        )
        return presenter.render_error(request, exc.detail, status_code=exc.status_code)

    app.add_exception_handler(PatientRecordsError, patient_records_exception_handler)
