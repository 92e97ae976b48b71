from datetime import date
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from tomorrow_architect.models.task import (
    DEFAULT_CATEGORY,
    DEFAULT_PRIORITY,
    TaskCategory,
    TaskPriority,
)

DAY_PATTERN = r"^(today|tomorrow|\d{4}-\d{2}-\d{2})$"


def check_day_key(value: str) -> str:
    """Reject well-shaped keys that name no calendar day, like 2025-13-45."""
    if value in ("today", "tomorrow"):
        return value
    date.fromisoformat(value)
    return value


DayKey = Annotated[str, Field(pattern=DAY_PATTERN), AfterValidator(check_day_key)]


class Task(BaseModel):
    """A planned task, serialized with the camelCase names of the stored blob."""

    id: str
    content: str
    is_completed: bool = Field(default=False, alias="isCompleted")
    target_date: str = Field(..., alias="targetDate", description="YYYY-MM-DD day key")
    priority: TaskPriority = DEFAULT_PRIORITY
    category: TaskCategory = DEFAULT_CATEGORY
    created_at: int = Field(default=0, alias="createdAt", description="Epoch milliseconds")
    estimated_duration: int | None = Field(default=None, alias="estimatedDuration", gt=0)
    suggested_time: str | None = Field(default=None, alias="suggestedTime")

    class Config:
        populate_by_name = True

    def to_record(self) -> dict:
        """Serialize to the persisted shape, omitting unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TaskCreate(BaseModel):
    content: str
    priority: TaskPriority = DEFAULT_PRIORITY
    category: TaskCategory = DEFAULT_CATEGORY
    # Defaults to tomorrow's key when omitted
    target_date: DayKey | None = Field(default=None, alias="targetDate")
    estimated_duration: int | None = Field(default=None, alias="estimatedDuration", gt=0)

    class Config:
        populate_by_name = True


class TaskMoveRequest(BaseModel):
    ids: list[str]
    target_date: DayKey = Field(..., alias="targetDate")

    class Config:
        populate_by_name = True


class TaskMoveResponse(BaseModel):
    moved: int
    target_date: str = Field(..., alias="targetDate")

    class Config:
        populate_by_name = True
