"""Domain models and DTOs."""

from tasktracker.domain.create_models import TaskCreate, UserCreate
from tasktracker.domain.task import Task, TaskCategory, TaskStatus
from tasktracker.domain.update_models import TaskUpdate, UserUpdate
from tasktracker.domain.user import User


__all__ = [
    "Task",
    "TaskCategory",
    "TaskCreate",
    "TaskStatus",
    "TaskUpdate",
    "User",
    "UserCreate",
    "UserUpdate",
]
