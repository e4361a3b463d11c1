from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from goaltracker.core.db import MongoModel
from goaltracker.utils import now


class User(MongoModel):
    """User account with credentials.

    Indexed on email - unique.
    """

    email: str  # Stored lower-cased
    display_name: str
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)


class SessionUser(BaseModel):
    """The authenticated principal stored in a session.

    A session holds either a complete SessionUser or nothing at all.
    """

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")
    display_name: str = Field(..., description="Name shown in the UI")

    @classmethod
    def from_domain(cls, user: User) -> "SessionUser":
        """Create the session view of a user."""
        return cls(id=user.id, email=user.email, display_name=user.display_name)
