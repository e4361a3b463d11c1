from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from goaltracker.config import Config
from goaltracker.core.core import Core
from goaltracker.core.modules.dashboard.models import DashboardStats
from goaltracker.core.modules.goal.models import Goal
from goaltracker.core.modules.goal.validators import validate_goal_fields
from goaltracker.core.modules.milestone.models import Milestone
from goaltracker.core.modules.milestone.validators import validate_milestone_fields
from goaltracker.core.modules.progress_log.models import ProgressLog
from goaltracker.core.modules.progress_log.validators import validate_log_fields
from goaltracker.core.modules.session.models import Session, SessionToken
from goaltracker.core.modules.user.models import SessionUser
from goaltracker.core.modules.user.validators import validate_login, validate_registration


class App:
    """Facade for all application operations.

    Operations on goals, milestones and logs take the authenticated principal
    as their first argument and validate raw input before anything reaches
    storage.
    """

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @property
    def config(self) -> Config:
        return self._core.config

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # Sessions

    def new_session(self) -> Session:
        return self._core.services.session.new_session()

    async def load_session(self, token: SessionToken) -> Session | None:
        return await self._core.services.session.get_session(token)

    async def save_session(self, session: Session) -> None:
        await self._core.services.session.save_session(session)

    async def discard_session(self, session: Session) -> None:
        await self._core.services.session.delete_session(session)

    # Accounts

    async def register(self, email: str, display_name: str, password: str) -> SessionUser:
        """Create an account and return the principal to log in as."""
        email, display_name = validate_registration(email, display_name, password)
        user = await self._core.services.user.create_user(email, display_name, password)
        return SessionUser.from_domain(user)

    async def login(self, email: str, password: str) -> SessionUser:
        """Check credentials and return the principal to log in as."""
        email = validate_login(email, password)
        user = await self._core.services.user.authenticate(email, password)
        return SessionUser.from_domain(user)

    # Goals

    async def list_goals(self, current_user: SessionUser) -> list[Goal]:
        return await self._core.services.goal.list_goals(current_user.id)

    async def get_goal(self, current_user: SessionUser, goal_id: UUID) -> Goal:
        return await self._core.services.goal.get_goal(goal_id, current_user.id)

    async def create_goal(
        self,
        current_user: SessionUser,
        title: str,
        description: str = "",
        target_date: str = "",
        progress: str = "",
        archived: bool = False,
    ) -> UUID:
        fields = validate_goal_fields(title, description, target_date, progress, archived)
        return await self._core.services.goal.create_goal(current_user.id, fields)

    async def update_goal(
        self,
        current_user: SessionUser,
        goal_id: UUID,
        title: str,
        description: str = "",
        target_date: str = "",
        progress: str = "",
        archived: bool = False,
    ) -> None:
        fields = validate_goal_fields(title, description, target_date, progress, archived)
        await self._core.services.goal.update_goal(goal_id, current_user.id, fields)

    async def delete_goal(self, current_user: SessionUser, goal_id: UUID) -> None:
        await self._core.services.goal.delete_goal(goal_id, current_user.id)

    # Milestones

    async def list_milestones(self, current_user: SessionUser, goal_id: UUID) -> list[Milestone]:
        await self._core.services.goal.get_goal(goal_id, current_user.id)
        return await self._core.services.milestone.list_milestones_by_goal(goal_id, current_user.id)

    async def create_milestone(self, current_user: SessionUser, goal_id: UUID, title: str, due: str = "") -> UUID:
        fields = validate_milestone_fields(title, due)
        return await self._core.services.milestone.create_milestone(current_user.id, goal_id, fields)

    async def update_milestone(
        self, current_user: SessionUser, milestone_id: UUID, title: str, due: str = ""
    ) -> None:
        fields = validate_milestone_fields(title, due)
        await self._core.services.milestone.update_milestone(milestone_id, current_user.id, fields)

    async def toggle_milestone(self, current_user: SessionUser, goal_id: UUID, milestone_id: UUID) -> bool:
        return await self._core.services.milestone.toggle_complete(milestone_id, goal_id, current_user.id)

    async def delete_milestone(self, current_user: SessionUser, goal_id: UUID, milestone_id: UUID) -> None:
        await self._core.services.milestone.delete_milestone(milestone_id, goal_id, current_user.id)

    # Progress logs

    async def list_logs(self, current_user: SessionUser, goal_id: UUID) -> list[ProgressLog]:
        await self._core.services.goal.get_goal(goal_id, current_user.id)
        return await self._core.services.progress_log.list_logs_by_goal(goal_id, current_user.id)

    async def create_log(
        self, current_user: SessionUser, goal_id: UUID, note: str, metric_name: str = "", metric_value: str = ""
    ) -> UUID:
        fields = validate_log_fields(note, metric_name, metric_value)
        return await self._core.services.progress_log.create_log(current_user.id, goal_id, fields)

    # Dashboard

    async def get_dashboard(self, current_user: SessionUser) -> DashboardStats:
        return await self._core.services.dashboard.get_stats(current_user.id)
