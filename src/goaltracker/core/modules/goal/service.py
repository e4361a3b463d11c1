from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from goaltracker.core.core import Service
from goaltracker.core.db import due_order_key
from goaltracker.core.modules.goal.models import Goal, GoalFields
from goaltracker.errors import NotFoundError
from goaltracker.utils import now

logger = structlog.get_logger(__name__)


class GoalService(Service):
    """Owner-scoped access to goals.

    Every method takes the owner id and every query filters on both `_id` and
    `user_id`, so a goal owned by someone else is indistinguishable from a
    missing one.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("goals")

    async def on_start(self) -> None:
        """Create indexes for owner lookups."""
        await self._collection.create_index([("user_id", 1), ("created_at", 1)])

    async def list_goals(self, owner_id: UUID) -> list[Goal]:
        """Goals of the owner, soonest target date first, undated last, then oldest first."""
        cursor = self._collection.find({"user_id": owner_id}).sort("created_at", 1)
        goals = await Goal.list_cursor(cursor)
        return sorted(goals, key=lambda goal: due_order_key(goal.target_date))

    async def get_goal(self, goal_id: UUID, owner_id: UUID) -> Goal:
        doc = await self._collection.find_one({"_id": goal_id, "user_id": owner_id})
        if doc is None:
            raise NotFoundError("Goal not found")
        return Goal.model_validate(doc)

    async def create_goal(self, owner_id: UUID, fields: GoalFields) -> UUID:
        goal = Goal(user_id=owner_id, **fields.model_dump())
        await self._collection.insert_one(goal.to_mongo())
        logger.info("goal_created", goal_id=goal.id, user_id=owner_id)
        return goal.id

    async def update_goal(self, goal_id: UUID, owner_id: UUID, fields: GoalFields) -> None:
        changes = fields.model_dump()
        changes["updated_at"] = now()
        result = await self._collection.update_one({"_id": goal_id, "user_id": owner_id}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError("Goal not found")
        logger.info("goal_updated", goal_id=goal_id, user_id=owner_id)

    async def delete_goal(self, goal_id: UUID, owner_id: UUID) -> None:
        """Delete the goal together with its milestones and logs."""
        result = await self._collection.delete_one({"_id": goal_id, "user_id": owner_id})
        if result.deleted_count == 0:
            raise NotFoundError("Goal not found")
        await self.core.services.milestone.delete_milestones_by_goal(goal_id, owner_id)
        await self.core.services.progress_log.delete_logs_by_goal(goal_id, owner_id)
        logger.info("goal_deleted", goal_id=goal_id, user_id=owner_id)
