from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from goaltracker.core.db import MongoModel
from goaltracker.utils import now


class ProgressLogFields(BaseModel):
    """Validated, user-editable log fields."""

    note: str
    metric_name: str | None = None
    metric_value: float | None = None


class ProgressLog(MongoModel):
    """A dated progress note on a goal, optionally with a measured value.

    Carries the owner's user_id next to goal_id. Indexed on (user_id, goal_id)
    and (user_id, created_at).
    """

    goal_id: UUID
    user_id: UUID
    note: str
    metric_name: str | None = None  # e.g. "km", "pages"
    metric_value: float | None = None
    created_at: datetime = Field(default_factory=now)
