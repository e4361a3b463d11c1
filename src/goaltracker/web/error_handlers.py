import logging
from typing import cast

from fastapi import Request
from fastapi.responses import RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from goaltracker.errors import (
    AuthenticationError,
    CsrfError,
    GuestOnlyError,
    LoginRequiredError,
    NotFoundError,
    ValidationError,
)
from goaltracker.web.deps import LANDING_PATH, LOGIN_PATH
from goaltracker.web.pages import render_error, render_page

logger = logging.getLogger(__name__)


async def user_error_handler(request: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with redirects or error pages."""
    if isinstance(exc, LoginRequiredError):
        return RedirectResponse(LOGIN_PATH, status_code=303)
    if isinstance(exc, GuestOnlyError):
        return RedirectResponse(LANDING_PATH, status_code=303)

    if isinstance(exc, CsrfError):
        status_code = 403
        title = "Invalid CSRF token"
    elif isinstance(exc, AuthenticationError):
        status_code = 401
        title = "Login failed"
    elif isinstance(exc, NotFoundError):
        status_code = 404
        title = "Not Found"
    elif isinstance(exc, ValidationError):
        return render_page(
            request,
            "error",
            {"title": "Invalid input", "message": str(exc), "errors": exc.errors, "error": {"status": 422}},
            status_code=422,
        )
    else:
        # Default for any other UserError subclass
        status_code = 400
        title = "Bad Request"

    return render_error(request, status_code, title, str(exc))


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    """Render routing errors (unknown path, wrong method) as pages."""
    exc = cast(StarletteHTTPException, exc)
    if exc.status_code == 404:
        response = render_error(request, 404, "Page Not Found", "The page you are looking for does not exist.")
    else:
        response = render_error(request, exc.status_code, "Error", str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle unexpected errors (500). Details are shown only in debug mode.

    Starlette runs this handler in ServerErrorMiddleware, outside
    SessionMiddleware, so the session is not saved and no cookie is set. A
    brand-new session therefore gets a CSRF token on this page that will not
    verify later.
    """
    logger.exception("Unexpected error: %s", exc)
    detail = f"{type(exc).__name__}: {exc}" if request.app.state.config.debug else None
    return render_error(request, 500, "Error", "An unexpected error occurred.", detail)
