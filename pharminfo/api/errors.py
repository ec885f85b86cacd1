"""
Error Handlers
Exception types and handlers for the site. Page errors render HTML;
JSON endpoints keep the JSON error body.
"""

import logging
from typing import Union

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

JSON_PATHS = ("/health", "/metrics")


class APIError(Exception):
    """Base exception for site errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(APIError):
    """Unknown category, article or product."""

    def __init__(self, resource: str, resource_id: Union[int, str]):
        super().__init__(
            message=f"{resource} not found: {resource_id}",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id},
        )


class ContentUnavailableError(APIError):
    """Content store failed to load."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(
            message=message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE, details=details
        )


def _wants_json(request: Request) -> bool:
    return request.url.path.startswith(JSON_PATHS)


def _render_error(request: Request, templates: Jinja2Templates, status_code: int) -> HTMLResponse:
    name = "404.html" if status_code == status.HTTP_404_NOT_FOUND else "error.html"
    return templates.TemplateResponse(
        request, name, {"status_code": status_code}, status_code=status_code
    )


def setup_error_handlers(app: FastAPI, templates: Jinja2Templates) -> None:
    """
    Set up error handlers for the app.

    Args:
        app: FastAPI application instance
        templates: Template set used for the HTML error pages
    """

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        log = logger.info if exc.status_code < 500 else logger.error
        log(
            f"API error: {exc.message}",
            extra={
                "status_code": exc.status_code,
                "details": exc.details,
                "path": request.url.path,
            },
        )

        if _wants_json(request):
            return JSONResponse(
                status_code=exc.status_code,
                content={
                    "error": {
                        "message": exc.message,
                        "type": exc.__class__.__name__,
                        "details": exc.details,
                    }
                },
            )
        return _render_error(request, templates, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        """Unmatched routes and framework-raised HTTP errors."""
        logger.info(
            f"HTTP {exc.status_code}: {request.url.path}",
            extra={"status_code": exc.status_code, "path": request.url.path},
        )
        if _wants_json(request):
            return JSONResponse(status_code=exc.status_code, content={"error": {"message": exc.detail}})
        return _render_error(request, templates, exc.status_code)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(f"Unexpected error: {exc}", exc_info=True, extra={"path": request.url.path})

        if _wants_json(request):
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": {"message": "An unexpected error occurred", "type": "InternalServerError"}},
            )
        return _render_error(request, templates, status.HTTP_500_INTERNAL_SERVER_ERROR)
