from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from goaltracker.core.core import Service
from goaltracker.core.modules.user.models import User
from goaltracker.errors import AuthenticationError, NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class UserService(Service):
    """Stores user accounts and checks credentials."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)

    async def get_user(self, user_id: UUID) -> User:
        """Get user by ID."""
        doc = await self._collection.find_one({"_id": user_id})
        if doc is None:
            raise NotFoundError(f"User '{user_id}' not found")
        return User.model_validate(doc)

    async def find_by_email(self, email: str) -> User | None:
        doc = await self._collection.find_one({"email": email})
        return User.model_validate(doc) if doc is not None else None

    async def create_user(self, email: str, display_name: str, password: str) -> User:
        """Create user with hashed password. Input must already be validated."""
        if await self.find_by_email(email) is not None:
            raise ValidationError.for_field("email", "An account with this email already exists")

        user = User(email=email, display_name=display_name, password_hash=self._hash_password(password))
        try:
            await self._collection.insert_one(user.to_mongo())
        except DuplicateKeyError:
            raise ValidationError.for_field("email", "An account with this email already exists") from None
        logger.info("user_registered", user_id=user.id)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        """Return the user owning these credentials, or raise AuthenticationError."""
        user = await self.find_by_email(email)
        if user is None or not bcrypt.checkpw(password.encode("utf-8"), user.password_hash.encode("utf-8")):
            logger.info("login_rejected")
            raise AuthenticationError
        return user

    def _hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.core.config.password_hash_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
