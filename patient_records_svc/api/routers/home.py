"""
Home router - the landing page.

The add-patient flow redirects here with a status message.
"""
from fastapi import APIRouter, Depends, Query, Request

from api.presenter import Presenter
from core.dependencies import get_presenter

router = APIRouter(tags=["Home"])


@router.get("/", name="index", summary="Landing page")
async def index(
    request: Request,
    message: str = Query("", description="Status message from a previous action"),
    presenter: Presenter = Depends(get_presenter)
):
    """Render the landing page with the patient search box."""
    return presenter.render_view(request, "home/index.html", message=message)
