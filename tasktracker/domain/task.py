"""Task domain models and enums."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(StrEnum):
    """Task lifecycle status offered to callers."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskCategory(StrEnum):
    """Task category offered to callers."""

    WORK = "work"
    PERSONAL = "personal"
    SHOPPING = "shopping"
    URGENT = "urgent"
    OTHER = "other"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class Task(BaseModel):
    """Task value object.

    Category and status are stored as plain strings: any non-empty value
    accepted by the caller layer is kept, TaskCategory/TaskStatus are only the
    suggested vocabulary.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., description="Unique, monotonically assigned task ID")
    title: str = Field(..., min_length=1, description="Task title (trimmed)")
    description: str = Field(default="", description="Detailed task description")
    category: str = Field(..., min_length=1, description="Task category")
    status: str = Field(..., min_length=1, description="Task status")
    assigned_to: str | None = Field(default=None, description="Assigned user ID (weak reference)")
    created_at: datetime = Field(default_factory=_utc_now, description="Creation timestamp")

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        """Treat naive timestamps as UTC."""
        return v if v.tzinfo is not None else v.replace(tzinfo=UTC)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Task":
        """Build a task from a raw on-disk record."""
        return cls.model_validate(record)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the raw on-disk record (camelCase keys, ISO timestamp)."""
        return self.model_dump(mode="json", by_alias=True)

    def summary(self) -> str:
        """One-line human-readable rendering."""
        assignee = self.assigned_to or "Unassigned"
        return f"[{self.status.upper()}] {self.title} ({self.category}) - Assigned to: {assignee}"

    def __str__(self) -> str:
        return self.summary()
