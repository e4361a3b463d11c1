from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer

from goaltracker.core.db import MongoModel, serialize_date
from goaltracker.utils import now


class MilestoneFields(BaseModel):
    """Validated, user-editable milestone fields."""

    title: str
    due: date | None = None

    @field_serializer("due")
    def serialize_due(self, value: date | None) -> str | None:
        return serialize_date(value)


class Milestone(MongoModel):
    """A step towards a goal.

    Carries the owner's user_id next to goal_id so authorization is a single
    filter on the milestone itself. Indexed on (user_id, goal_id).
    """

    goal_id: UUID
    user_id: UUID
    title: str
    due: date | None = None
    is_complete: bool = False
    created_at: datetime = Field(default_factory=now)

    @field_serializer("due")
    def serialize_due(self, value: date | None) -> str | None:
        return serialize_date(value)
