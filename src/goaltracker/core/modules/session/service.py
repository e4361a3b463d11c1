from datetime import timedelta
from typing import Any

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from goaltracker.core.core import Service
from goaltracker.core.modules.session.models import Session, SessionToken
from goaltracker.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Service for the server-side session store."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Unique index for token (cookie lookups)
        await self._collection.create_index([("token", 1)], unique=True)
        # TTL index, MongoDB removes a session once expires_at has passed
        await self._collection.create_index([("expires_at", 1)], expireAfterSeconds=0)

    def new_session(self) -> Session:
        """Create an anonymous session. Nothing is stored until save_session."""
        return Session()

    async def get_session(self, token: SessionToken) -> Session | None:
        """Load a live session. Unknown and expired tokens both give None."""
        # The TTL monitor runs periodically, so expiry is checked here as well
        doc = await self._collection.find_one({"token": token, "expires_at": {"$gt": now()}})
        if doc is None:
            return None
        return Session.model_validate(doc)

    async def save_session(self, session: Session) -> None:
        """Store the session and push its expiry forward by the configured TTL."""
        session.expires_at = now() + timedelta(seconds=self.core.config.session_max_age)
        await self._collection.replace_one({"_id": session.id}, session.to_mongo(), upsert=True)

    async def delete_session(self, session: Session) -> None:
        await self._collection.delete_one({"_id": session.id})
        logger.debug("session_deleted", session_id=session.id)
