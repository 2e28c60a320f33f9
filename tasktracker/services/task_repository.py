"""Task repository: CRUD, identifier assignment and queries over the task collection."""

import logging
from collections.abc import Mapping
from typing import Any

from tasktracker.core.config import constants
from tasktracker.core.errors import NotFoundError
from tasktracker.core.logging import log_with_context, span
from tasktracker.core.persistence_store import PersistenceStore
from tasktracker.domain.create_models import TaskCreate
from tasktracker.domain.task import Task, TaskStatus
from tasktracker.domain.update_models import TaskUpdate
from tasktracker.services.repository import EntityRepository, parse_payload


logger = logging.getLogger(__name__)


class TaskRepository(EntityRepository[Task, int]):
    """Task collection with integer ids that are never reused within a process."""

    collection = constants.TASKS_COLLECTION
    entity_type = Task

    def __init__(self, store: PersistenceStore) -> None:
        super().__init__(store)
        self._next_id = constants.FIRST_TASK_ID

    def _on_loaded(self) -> None:
        highest = max((task.id for task in self._items), default=constants.FIRST_TASK_ID - 1)
        # Never move backwards, even if initialize() runs again after deletions
        self._next_id = max(self._next_id, highest + 1)

    async def add(self, data: TaskCreate | Mapping[str, Any]) -> Task:
        """Create a task with the next id and persist it.

        Args:
            data: title, category and status are required; description and
                assigned_to are optional

        Returns:
            The created task

        Raises:
            ValidationError: If title is blank or category/status is missing
            StorageError: If persisting fails
        """
        with span("task_repository.add"):
            payload = parse_payload(TaskCreate, data)

            async with self._lock:
                self._require_initialized()
                task = Task(id=self._next_id, **payload.model_dump())
                self._next_id += 1
                self._items.append(task)
                self._persist()

            log_with_context(logger, "info", "Added task", collection=self.collection, record_id=task.id)
            return task

    async def update(self, task_id: int, changes: TaskUpdate | Mapping[str, Any]) -> Task:
        """Apply the supplied fields to a task and persist.

        Fields absent from ``changes`` are left untouched. Every supplied field
        is validated before any of them is applied.

        Raises:
            NotFoundError: If no task has this id
            ValidationError: If a supplied field is invalid
            StorageError: If persisting fails
        """
        with span("task_repository.update"):
            async with self._lock:
                self._require_initialized()
                index = self._index_of(task_id)
                if index is None:
                    msg = f"Task with ID {task_id} not found"
                    raise NotFoundError(msg)

                payload = parse_payload(TaskUpdate, changes)
                task = self._items[index].model_copy(update=payload.changes())
                self._items[index] = task
                self._persist()

            log_with_context(
                logger,
                "info",
                "Updated task",
                collection=self.collection,
                record_id=task_id,
                fields=sorted(payload.model_fields_set),
            )
            return task

    async def complete(self, task_id: int) -> Task:
        """Mark a task as completed."""
        return await self.update(task_id, {"status": TaskStatus.COMPLETED})

    async def filter_by_category(self, category: str) -> list[Task]:
        """Tasks whose category equals ``category``, ignoring case."""
        wanted = category.lower()
        return await self._select(lambda task: task.category.lower() == wanted)

    async def filter_by_status(self, status: str) -> list[Task]:
        """Tasks whose status equals ``status``, ignoring case."""
        wanted = status.lower()
        return await self._select(lambda task: task.status.lower() == wanted)

    async def filter_by_user(self, user_id: str | None) -> list[Task]:
        """Tasks assigned to ``user_id``. None selects unassigned tasks."""
        return await self._select(lambda task: task.assigned_to == user_id)

    async def search_by_keyword(self, keyword: str) -> list[Task]:
        """Tasks whose title or description contains ``keyword``, ignoring case."""
        needle = keyword.lower()
        return await self._select(
            lambda task: needle in task.title.lower() or needle in task.description.lower()
        )
