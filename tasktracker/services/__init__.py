from tasktracker.services.repository import EntityRepository
from tasktracker.services.task_repository import TaskRepository
from tasktracker.services.user_repository import UserRepository


__all__ = [
    "EntityRepository",
    "TaskRepository",
    "UserRepository",
]
