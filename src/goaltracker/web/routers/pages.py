"""Public pages, the dashboard and the liveness probe."""

from fastapi import APIRouter, Request
from fastapi.responses import Response

from goaltracker.web.deps import AppDep, CurrentUserDep
from goaltracker.web.pages import render_page

router = APIRouter(tags=["pages"])

FEATURES = [
    {"title": "Accounts & Profiles", "copy": "Sign up, log in, manage your profile."},
    {"title": "Goals", "copy": "Create, update, archive goals like “Run 5k” or “Save $500”."},
    {"title": "Milestones", "copy": "Break big goals into steps with due dates and completion toggles."},
    {"title": "Progress Logs", "copy": "Add dated notes and optional numeric values."},
    {"title": "Dashboard", "copy": "See where every goal stands at a glance."},
]


@router.get("/")
async def home(request: Request) -> Response:
    return render_page(request, "index", {"title": "Home", "features": FEATURES})


@router.get("/about")
async def about(request: Request) -> Response:
    return render_page(request, "about", {"title": "About", "show_hero": False})


@router.get("/dashboard")
async def dashboard(request: Request, app: AppDep, current_user: CurrentUserDep) -> Response:
    stats = await app.get_dashboard(current_user)
    return render_page(request, "dashboard", {"title": "Dashboard", "stats": stats})


@router.get("/healthz")
async def health_check() -> dict[str, bool]:
    return {"ok": True}
