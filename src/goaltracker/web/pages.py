"""Page rendering.

Templates are not part of this service. A page is a Liquid shell naming the
template and carrying its context as JSON, plus the CSRF token in a meta tag
for scripts. Every page context gets `user` and `csrf_token`.
"""

import json
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse
from liquid import Environment
from pydantic_core import to_jsonable_python

PAGE_SHELL = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="csrf-token" content="{{ csrf_token | escape }}">
<title>{{ title | escape }}</title>
</head>
<body data-template="{{ template | escape }}">
<script type="application/json" id="page-context">{{ context }}</script>
</body>
</html>
"""

shell = Environment().from_string(PAGE_SHELL)


def page_context(request: Request, context: dict[str, Any]) -> dict[str, Any]:
    """Add the current user and a CSRF token for the current session."""
    session = getattr(request.state, "session", None)
    base: dict[str, Any] = {"user": None, "csrf_token": ""}
    if session is not None and not session.is_destroyed:
        base = {"user": session.user, "csrf_token": session.issue_csrf_token()}
    return base | context


def render_page(
    request: Request, template: str, context: dict[str, Any] | None = None, status_code: int = 200
) -> HTMLResponse:
    full_context = page_context(request, context or {})
    # "<" is escaped so the JSON cannot close the script element
    data = json.dumps(to_jsonable_python(full_context)).replace("<", "\\u003c")
    body = shell.render(
        csrf_token=full_context["csrf_token"],
        title=str(full_context.get("title", "Goal Tracker")),
        template=template,
        context=data,
    )
    return HTMLResponse(body, status_code=status_code)


def render_error(
    request: Request, status_code: int, title: str, message: str, detail: str | None = None
) -> HTMLResponse:
    error: dict[str, Any] = {"status": status_code}
    if detail is not None:
        error["detail"] = detail
    return render_page(
        request, "error", {"title": title, "message": message, "error": error}, status_code=status_code
    )
