from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from goaltracker.app import App
from goaltracker.config import Config
from goaltracker.errors import UserError
from goaltracker.web.deps import verify_csrf
from goaltracker.web.error_handlers import general_exception_handler, http_exception_handler, user_error_handler
from goaltracker.web.routers import goals_router, pages_router, users_router
from goaltracker.web.session import SessionMiddleware


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application.

    Request pipeline: session resolution (middleware), CSRF check (app-wide
    dependency, runs first), auth guards (router and route dependencies),
    then the handler.
    """

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Goal Tracker",
        lifespan=lifespan,
        dependencies=[Depends(verify_csrf)],
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    # Store app instance and config in app state
    app.state.app = app_instance
    app.state.config = config

    app.add_middleware(
        SessionMiddleware,
        store=app_instance,
        secret_key=config.session_secret_key,
        cookie_name=config.session_cookie_name,
        max_age=config.session_max_age,
        https_only=config.https_only,
    )

    app.include_router(pages_router)
    app.include_router(users_router)
    app.include_router(goals_router)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    return app
