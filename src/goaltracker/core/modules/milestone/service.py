from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from goaltracker.core.core import Service
from goaltracker.core.db import due_order_key
from goaltracker.core.modules.milestone.models import Milestone, MilestoneFields
from goaltracker.errors import NotFoundError

logger = structlog.get_logger(__name__)


def milestone_filter(milestone_id: UUID, owner_id: UUID, goal_id: UUID | None = None) -> dict[str, Any]:
    query: dict[str, Any] = {"_id": milestone_id, "user_id": owner_id}
    if goal_id is not None:
        query["goal_id"] = goal_id
    return query


class MilestoneService(Service):
    """Owner-scoped access to milestones. Every query filters on `_id` and `user_id`."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("milestones")

    async def on_start(self) -> None:
        """Create indexes for owner and goal lookups."""
        await self._collection.create_index([("user_id", 1), ("goal_id", 1)])
        await self._collection.create_index([("user_id", 1), ("is_complete", 1)])

    async def list_milestones(self, owner_id: UUID) -> list[Milestone]:
        """All milestones of the owner, soonest due first, undated last."""
        return await self._list({"user_id": owner_id})

    async def list_milestones_by_goal(self, goal_id: UUID, owner_id: UUID) -> list[Milestone]:
        return await self._list({"goal_id": goal_id, "user_id": owner_id})

    async def get_milestone(self, milestone_id: UUID, owner_id: UUID, goal_id: UUID | None = None) -> Milestone:
        """Get a milestone of the owner, optionally only if it belongs to `goal_id`."""
        doc = await self._collection.find_one(milestone_filter(milestone_id, owner_id, goal_id))
        if doc is None:
            raise NotFoundError("Milestone not found")
        return Milestone.model_validate(doc)

    async def create_milestone(self, owner_id: UUID, goal_id: UUID, fields: MilestoneFields) -> UUID:
        """Create a milestone under one of the owner's goals."""
        await self.core.services.goal.get_goal(goal_id, owner_id)
        milestone = Milestone(goal_id=goal_id, user_id=owner_id, **fields.model_dump())
        await self._collection.insert_one(milestone.to_mongo())
        logger.info("milestone_created", milestone_id=milestone.id, goal_id=goal_id, user_id=owner_id)
        return milestone.id

    async def update_milestone(self, milestone_id: UUID, owner_id: UUID, fields: MilestoneFields) -> None:
        result = await self._collection.update_one(
            milestone_filter(milestone_id, owner_id), {"$set": fields.model_dump()}
        )
        if result.matched_count == 0:
            raise NotFoundError("Milestone not found")

    async def toggle_complete(self, milestone_id: UUID, goal_id: UUID, owner_id: UUID) -> bool:
        """Flip the completion flag and return the new value.

        This is a read followed by a write. Two concurrent toggles of the same
        milestone can both read the same state, and then the last write wins.
        """
        milestone = await self.get_milestone(milestone_id, owner_id, goal_id)
        is_complete = not milestone.is_complete
        result = await self._collection.update_one(
            milestone_filter(milestone_id, owner_id, goal_id), {"$set": {"is_complete": is_complete}}
        )
        if result.matched_count == 0:
            raise NotFoundError("Milestone not found")
        logger.info("milestone_toggled", milestone_id=milestone_id, is_complete=is_complete)
        return is_complete

    async def delete_milestone(self, milestone_id: UUID, goal_id: UUID, owner_id: UUID) -> None:
        result = await self._collection.delete_one(milestone_filter(milestone_id, owner_id, goal_id))
        if result.deleted_count == 0:
            raise NotFoundError("Milestone not found")
        logger.info("milestone_deleted", milestone_id=milestone_id, user_id=owner_id)

    async def delete_milestones_by_goal(self, goal_id: UUID, owner_id: UUID) -> int:
        """Delete all milestones of a goal and return count of deleted milestones."""
        result = await self._collection.delete_many({"goal_id": goal_id, "user_id": owner_id})
        return result.deleted_count

    async def count_active_milestones(self, owner_id: UUID) -> int:
        return await self._collection.count_documents({"user_id": owner_id, "is_complete": False})

    async def _list(self, query: dict[str, Any]) -> list[Milestone]:
        cursor = self._collection.find(query).sort("created_at", 1)
        milestones = await Milestone.list_cursor(cursor)
        return sorted(milestones, key=lambda milestone: due_order_key(milestone.due))
