from goaltracker.web.routers.goals import router as goals_router
from goaltracker.web.routers.pages import router as pages_router
from goaltracker.web.routers.users import router as users_router

__all__ = [
    "goals_router",
    "pages_router",
    "users_router",
]
