from typing import Annotated, cast

import structlog
from fastapi import Depends, Request

from goaltracker.app import App
from goaltracker.core.modules.session.models import Session
from goaltracker.core.modules.user.models import SessionUser
from goaltracker.errors import CsrfError, GuestOnlyError, LoginRequiredError

logger = structlog.get_logger(__name__)

LOGIN_PATH = "/users/login"
LANDING_PATH = "/dashboard"

CSRF_HEADER = "X-CSRF-Token"
CSRF_FORM_FIELD = "_csrf"
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


def get_session(request: Request) -> Session:
    """The session resolved by SessionMiddleware for this request."""
    return cast(Session, request.state.session)


async def verify_csrf(request: Request, session: Annotated[Session, Depends(get_session)]) -> None:
    """Reject state-changing requests without a token issued for this session."""
    if request.method not in MUTATING_METHODS:
        return

    token = request.headers.get(CSRF_HEADER)
    if not token and request.headers.get("content-type", "").startswith(FORM_CONTENT_TYPES):
        value = (await request.form()).get(CSRF_FORM_FIELD)
        token = value if isinstance(value, str) else None

    if not token or not session.check_csrf_token(token):
        logger.warning("csrf_rejected", method=request.method, path=request.url.path)
        raise CsrfError


def require_auth(request: Request, session: Annotated[Session, Depends(get_session)]) -> SessionUser:
    """Let only logged-in users through.

    For GET requests the requested URL is remembered so login can send the
    user back there. Other methods are never remembered, a form submission
    must not be replayed by a redirect.
    """
    if session.user is None:
        if request.method == "GET":
            path = request.url.path
            if request.url.query:
                path += f"?{request.url.query}"
            session.set_return_to(path)
        raise LoginRequiredError
    return session.user


def require_guest(session: Annotated[Session, Depends(get_session)]) -> None:
    """Let only anonymous users through."""
    if session.user is not None:
        raise GuestOnlyError


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
SessionDep = Annotated[Session, Depends(get_session)]
CurrentUserDep = Annotated[SessionUser, Depends(require_auth)]
