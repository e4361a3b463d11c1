from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from goaltracker.core.core import Service
from goaltracker.core.modules.progress_log.models import ProgressLog, ProgressLogFields
from goaltracker.errors import NotFoundError

logger = structlog.get_logger(__name__)


class ProgressLogService(Service):
    """Owner-scoped access to progress logs, newest first."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("logs")

    async def on_start(self) -> None:
        """Create indexes for owner, goal and date lookups."""
        await self._collection.create_index([("user_id", 1), ("goal_id", 1)])
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])

    async def list_logs(self, owner_id: UUID) -> list[ProgressLog]:
        cursor = self._collection.find({"user_id": owner_id}).sort("created_at", -1)
        return await ProgressLog.list_cursor(cursor)

    async def list_logs_by_goal(self, goal_id: UUID, owner_id: UUID) -> list[ProgressLog]:
        cursor = self._collection.find({"goal_id": goal_id, "user_id": owner_id}).sort("created_at", -1)
        return await ProgressLog.list_cursor(cursor)

    async def get_log(self, log_id: UUID, owner_id: UUID) -> ProgressLog:
        doc = await self._collection.find_one({"_id": log_id, "user_id": owner_id})
        if doc is None:
            raise NotFoundError("Log not found")
        return ProgressLog.model_validate(doc)

    async def create_log(self, owner_id: UUID, goal_id: UUID, fields: ProgressLogFields) -> UUID:
        """Add a log entry to one of the owner's goals."""
        await self.core.services.goal.get_goal(goal_id, owner_id)
        log = ProgressLog(goal_id=goal_id, user_id=owner_id, **fields.model_dump())
        await self._collection.insert_one(log.to_mongo())
        logger.info("log_created", log_id=log.id, goal_id=goal_id, user_id=owner_id)
        return log.id

    async def update_log(self, log_id: UUID, owner_id: UUID, fields: ProgressLogFields) -> None:
        result = await self._collection.update_one({"_id": log_id, "user_id": owner_id}, {"$set": fields.model_dump()})
        if result.matched_count == 0:
            raise NotFoundError("Log not found")

    async def delete_log(self, log_id: UUID, owner_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": log_id, "user_id": owner_id})
        if result.deleted_count == 0:
            raise NotFoundError("Log not found")

    async def delete_logs_by_goal(self, goal_id: UUID, owner_id: UUID) -> int:
        """Delete all logs of a goal and return count of deleted logs."""
        result = await self._collection.delete_many({"goal_id": goal_id, "user_id": owner_id})
        return result.deleted_count

    async def count_logs_since(self, owner_id: UUID, since: datetime) -> int:
        return await self._collection.count_documents({"user_id": owner_id, "created_at": {"$gte": since}})
