from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class TaskCreate(BaseModel):
    """
    A manually added task. Any ``recurring``/``recurrence_pattern`` sent by
    the client is ignored; recurrence follows the category.
    """
    user_id: int
    task: Optional[str] = None
    category: str
    scheduled_date: Optional[datetime] = None
    source_assessment_id: Optional[int] = None

    @field_validator("scheduled_date")
    @classmethod
    def to_local_naive(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Stored datetimes are naive local time
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class TaskUpdate(BaseModel):
    completed: bool


class TaskResponse(BaseModel):
    id: int
    user_id: int
    task: str
    category: str
    category_display: Optional[str] = None
    completed: bool
    scheduled_date: Optional[str] = None
    source_assessment_id: Optional[int] = None
    recurring: bool
    recurrence_pattern: Optional[str] = None
    created_at: Optional[str] = None
