from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

from goaltracker.core.db import MongoModel, serialize_date
from goaltracker.utils import now


class GoalFields(BaseModel):
    """Validated, user-editable goal fields."""

    title: str
    description: str | None = None
    target_date: date | None = None
    progress: int = Field(default=0, ge=0, le=100)  # Percent complete
    archived: bool = False

    @field_serializer("target_date")
    def serialize_target_date(self, value: date | None) -> str | None:
        return serialize_date(value)


class Goal(MongoModel):
    """A goal owned by a single user.

    Indexed on user_id.
    """

    user_id: UUID
    title: str
    description: str | None = None
    target_date: date | None = None
    progress: int = 0
    archived: bool = False
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime | None = None

    @field_serializer("target_date")
    def serialize_target_date(self, value: date | None) -> str | None:
        return serialize_date(value)
