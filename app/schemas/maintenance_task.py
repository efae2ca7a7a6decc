from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TaskStatus(str, Enum):
    OPEN = "open"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MaintenanceTask(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    property_id: int
    title: str
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    task_status: TaskStatus
    assigned_to: str | None = None
    created_at: datetime | None = None


class MaintenanceTaskCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    property_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    task_status: TaskStatus = TaskStatus.OPEN
    assigned_to: str | None = Field(None, max_length=255)


class MaintenanceTaskUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    property_id: int | None = None
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    due_date: date | None = None
    priority: TaskPriority | None = None
    task_status: TaskStatus | None = None
    assigned_to: str | None = Field(None, max_length=255)

    @model_validator(mode="after")
    def validate_required_fields_not_cleared(self):
        """Ensure property_id, title and task_status are never set to null."""
        for name in ("property_id", "title", "task_status"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
