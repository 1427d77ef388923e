"""
Presenter - renders server-side views and builds redirects.

Routers decide *which* view to show; the Presenter only turns a view name
and a model into a response. Views live in the templates directory:

    templates/
        home/index.html          landing page
        patient/add.html         add form
        patient/get.html         patient detail
        patient/edit.html        edit form
        patient/_list.html       search result fragment (partial)
        shared/error.html        generic error page
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from core.datetime_utils import format_date, format_for_display

logger = logging.getLogger(__name__)

ERROR_VIEW = "shared/error.html"


class Presenter:
    """Renders Jinja2 views, partials, error pages and redirects."""

    def __init__(self, templates_dir: str):
        self.templates = Jinja2Templates(directory=templates_dir)
        self.templates.env.filters["date"] = format_date
        self.templates.env.filters["datetime"] = format_for_display

    def render_view(
        self,
        request: Request,
        name: str,
        model: Any = None,
        status_code: int = status.HTTP_200_OK,
        errors: Optional[Dict[str, str]] = None,
        **context: Any
    ) -> HTMLResponse:
        """
        Render a full page.

        Args:
            request: Current request (needed for url_for in templates).
            name: Template path relative to the templates directory.
            model: Object exposed to the template as `model`.
            status_code: HTTP status of the response.
            errors: Field name to message mapping shown next to form fields.
            **context: Extra template variables (e.g. message).
        """
        view_context = {"model": model, "errors": errors or {}}
        view_context.update(context)
        return self.templates.TemplateResponse(
            request, name, view_context, status_code=status_code
        )

    def render_partial(self, request: Request, name: str, model: Any = None) -> HTMLResponse:
        """Render a page fragment meant to be inserted by client-side script."""
        return self.templates.TemplateResponse(request, name, {"model": model})

    def render_error(
        self,
        request: Request,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    ) -> HTMLResponse:
        """Render the generic error page."""
        return self.render_view(request, ERROR_VIEW, message=message, status_code=status_code)

    def redirect(self, url: str, **params: Any) -> RedirectResponse:
        """
        Redirect (303 See Other) to `url` with params as the query string.

        None values are dropped.
        """
        query = urlencode({key: value for key, value in params.items() if value is not None})
        target = f"{url}?{query}" if query else url
        return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
