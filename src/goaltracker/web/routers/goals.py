"""Goal pages with their milestones and progress logs.

Every route requires a logged-in user and every lookup is scoped to that
user, so another user's goal id answers 404 like an unknown one.
"""

from typing import Annotated, Any
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse, Response

from goaltracker.core.modules.user.models import SessionUser
from goaltracker.errors import ValidationError
from goaltracker.utils import parse_id
from goaltracker.web.deps import AppDep, CurrentUserDep, require_auth
from goaltracker.web.pages import render_page

router = APIRouter(prefix="/goals", tags=["goals"], dependencies=[Depends(require_auth)])


def goal_url(goal_id: UUID) -> str:
    return f"/goals/{goal_id}"


async def render_goal(
    request: Request,
    app: AppDep,
    current_user: SessionUser,
    goal_id: UUID,
    extra: dict[str, Any] | None = None,
    status_code: int = 200,
) -> Response:
    """Render the goal detail page with its milestones and logs."""
    goal = await app.get_goal(current_user, goal_id)
    context = {
        "title": goal.title,
        "goal": goal,
        "milestones": await app.list_milestones(current_user, goal_id),
        "logs": await app.list_logs(current_user, goal_id),
        "errors": {},
        "values": {},
    }
    return render_page(request, "goals/show", context | (extra or {}), status_code=status_code)


@router.get("")
async def list_goals(request: Request, app: AppDep, current_user: CurrentUserDep) -> Response:
    goals = await app.list_goals(current_user)
    return render_page(request, "goals/index", {"title": "Goals", "goals": goals})


@router.get("/new")
async def new_goal_form(request: Request) -> Response:
    return render_page(request, "goals/new", {"title": "New Goal", "errors": {}, "values": {}})


@router.post("")
async def create_goal(
    request: Request,
    app: AppDep,
    current_user: CurrentUserDep,
    title: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    target_date: Annotated[str, Form()] = "",
) -> Response:
    try:
        goal_id = await app.create_goal(current_user, title, description, target_date)
    except ValidationError as e:
        values = {"title": title, "description": description, "target_date": target_date}
        return render_page(
            request, "goals/new", {"title": "New Goal", "errors": e.errors, "values": values}, status_code=422
        )
    return RedirectResponse(goal_url(goal_id), status_code=303)


@router.get("/{goal_id}")
async def show_goal(goal_id: str, request: Request, app: AppDep, current_user: CurrentUserDep) -> Response:
    return await render_goal(request, app, current_user, parse_id(goal_id))


@router.get("/{goal_id}/edit")
async def edit_goal_form(goal_id: str, request: Request, app: AppDep, current_user: CurrentUserDep) -> Response:
    goal = await app.get_goal(current_user, parse_id(goal_id))
    values = goal.model_dump(include={"title", "description", "target_date", "progress", "archived"})
    return render_page(
        request, "goals/edit", {"title": f"Edit: {goal.title}", "goal": goal, "errors": {}, "values": values}
    )


@router.post("/{goal_id}")
@router.post("/{goal_id}/edit")  # Legacy form action
async def update_goal(
    goal_id: str,
    request: Request,
    app: AppDep,
    current_user: CurrentUserDep,
    title: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    target_date: Annotated[str, Form()] = "",
    progress: Annotated[str, Form()] = "",
    archived: Annotated[str | None, Form()] = None,
) -> Response:
    goal_uuid = parse_id(goal_id)
    try:
        await app.update_goal(current_user, goal_uuid, title, description, target_date, progress, bool(archived))
    except ValidationError as e:
        values = {
            "id": goal_uuid,
            "title": title,
            "description": description,
            "target_date": target_date,
            "progress": progress,
            "archived": bool(archived),
        }
        return render_page(
            request, "goals/edit", {"title": "Edit Goal", "errors": e.errors, "values": values}, status_code=422
        )
    return RedirectResponse(goal_url(goal_uuid), status_code=303)


@router.post("/{goal_id}/delete")
async def delete_goal(goal_id: str, app: AppDep, current_user: CurrentUserDep) -> Response:
    await app.delete_goal(current_user, parse_id(goal_id))
    return RedirectResponse("/goals", status_code=303)


@router.get("/{goal_id}/milestones")
async def list_milestones(goal_id: str, request: Request, app: AppDep, current_user: CurrentUserDep) -> Response:
    goal_uuid = parse_id(goal_id)
    goal = await app.get_goal(current_user, goal_uuid)
    milestones = await app.list_milestones(current_user, goal_uuid)
    return render_page(
        request, "goals/milestones", {"title": f"Milestones: {goal.title}", "goal": goal, "milestones": milestones}
    )


@router.post("/{goal_id}/milestones")
async def create_milestone(
    goal_id: str,
    request: Request,
    app: AppDep,
    current_user: CurrentUserDep,
    title: Annotated[str, Form()] = "",
    due: Annotated[str, Form()] = "",
) -> Response:
    goal_uuid = parse_id(goal_id)
    try:
        await app.create_milestone(current_user, goal_uuid, title, due)
    except ValidationError as e:
        extra = {"errors": e.errors, "values": {"title": title, "due": due}}
        return await render_goal(request, app, current_user, goal_uuid, extra, status_code=422)
    return RedirectResponse(goal_url(goal_uuid), status_code=303)


@router.post("/{goal_id}/milestones/{milestone_id}/toggle")
async def toggle_milestone(goal_id: str, milestone_id: str, app: AppDep, current_user: CurrentUserDep) -> Response:
    goal_uuid, milestone_uuid = parse_id(goal_id), parse_id(milestone_id)
    await app.toggle_milestone(current_user, goal_uuid, milestone_uuid)
    return RedirectResponse(goal_url(goal_uuid), status_code=303)


@router.post("/{goal_id}/milestones/{milestone_id}/delete")
async def delete_milestone(goal_id: str, milestone_id: str, app: AppDep, current_user: CurrentUserDep) -> Response:
    goal_uuid, milestone_uuid = parse_id(goal_id), parse_id(milestone_id)
    await app.delete_milestone(current_user, goal_uuid, milestone_uuid)
    return RedirectResponse(goal_url(goal_uuid), status_code=303)


@router.get("/{goal_id}/logs")
async def list_logs(goal_id: str, request: Request, app: AppDep, current_user: CurrentUserDep) -> Response:
    goal_uuid = parse_id(goal_id)
    goal = await app.get_goal(current_user, goal_uuid)
    logs = await app.list_logs(current_user, goal_uuid)
    return render_page(request, "goals/logs", {"title": f"Progress: {goal.title}", "goal": goal, "logs": logs})


@router.post("/{goal_id}/logs")
async def create_log(
    goal_id: str,
    request: Request,
    app: AppDep,
    current_user: CurrentUserDep,
    note: Annotated[str, Form()] = "",
    metric_name: Annotated[str, Form()] = "",
    metric_value: Annotated[str, Form()] = "",
) -> Response:
    goal_uuid = parse_id(goal_id)
    try:
        await app.create_log(current_user, goal_uuid, note, metric_name, metric_value)
    except ValidationError as e:
        extra = {"errors": e.errors, "values": {"note": note, "metric_name": metric_name, "metric_value": metric_value}}
        return await render_goal(request, app, current_user, goal_uuid, extra, status_code=422)
    return RedirectResponse(goal_url(goal_uuid), status_code=303)
