"""Account pages: register, login, logout and the profile."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse, Response

from goaltracker.core.modules.session.models import Session
from goaltracker.core.modules.user.models import SessionUser
from goaltracker.errors import AuthenticationError, ValidationError
from goaltracker.web.deps import LANDING_PATH, AppDep, CurrentUserDep, SessionDep, require_guest
from goaltracker.web.pages import render_page

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


def log_in(session: Session, user: SessionUser) -> RedirectResponse:
    """Attach the user to the session and go back to where they were headed."""
    session.login(user)
    # The middleware bound user_id before the handler ran
    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    logger.info("user_logged_in")
    return RedirectResponse(session.pop_return_to() or LANDING_PATH, status_code=303)


@router.get("/register", dependencies=[Depends(require_guest)])
async def register_form(request: Request) -> Response:
    return render_page(request, "users/register", {"title": "Register", "errors": {}, "values": {}})


@router.post("/register", dependencies=[Depends(require_guest)])
async def register(
    request: Request,
    app: AppDep,
    session: SessionDep,
    email: Annotated[str, Form()] = "",
    display_name: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    try:
        user = await app.register(email, display_name, password)
    except ValidationError as e:
        return render_page(
            request,
            "users/register",
            {"title": "Register", "errors": e.errors, "values": {"email": email, "display_name": display_name}},
            status_code=422,
        )
    return log_in(session, user)


@router.get("/login", dependencies=[Depends(require_guest)])
async def login_form(request: Request) -> Response:
    return render_page(request, "users/login", {"title": "Login", "errors": {}, "values": {}})


@router.post("/login", dependencies=[Depends(require_guest)])
async def login(
    request: Request,
    app: AppDep,
    session: SessionDep,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
) -> Response:
    try:
        user = await app.login(email, password)
    except ValidationError as e:
        return render_page(
            request, "users/login", {"title": "Login", "errors": e.errors, "values": {"email": email}}, status_code=422
        )
    except AuthenticationError as e:
        return render_page(
            request,
            "users/login",
            {"title": "Login", "errors": {"form": str(e)}, "values": {"email": email}},
            status_code=401,
        )
    return log_in(session, user)


@router.post("/logout")
async def logout(session: SessionDep) -> Response:
    session.destroy()
    return RedirectResponse("/", status_code=303)


@router.get("/profile")
async def profile(request: Request, current_user: CurrentUserDep) -> Response:
    return render_page(request, "users/profile", {"title": "Your Profile", "profile": current_user})
