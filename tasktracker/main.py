"""tasktracker - task and user record store for a collaborative task tracker.

A front-end composes the store once and awaits ``initialize()`` before use::

    tracker = create_repositories()
    await tracker.initialize()
    task = await tracker.tasks.add({"title": "Report", "category": "work", "status": "pending"})
"""

import logging
from dataclasses import dataclass

from tasktracker.core.config import Settings, settings
from tasktracker.core.logging import configure_logfire
from tasktracker.core.persistence_store import PersistenceStore
from tasktracker.services.task_repository import TaskRepository
from tasktracker.services.user_repository import UserRepository


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskTracker:
    """The two repositories of one application, sharing a data directory."""

    store: PersistenceStore
    tasks: TaskRepository
    users: UserRepository

    async def initialize(self) -> None:
        """Create the data directory and hydrate both collections from disk.

        Raises:
            StorageError: If the directory cannot be created or a file is unreadable
        """
        self.store.ensure_data_dir()
        await self.users.initialize()
        await self.tasks.initialize()
        logger.info(
            "startup_validation",
            extra={"data_dir": str(self.store.data_dir), "status": "ok"},
        )


def create_repositories(app_settings: Settings | None = None) -> TaskTracker:
    """Configure logging and build (but do not initialize) the repositories for the data directory."""
    app_settings = app_settings or settings
    configure_logfire(app_settings)
    store = PersistenceStore(app_settings.data_dir)
    return TaskTracker(store=store, tasks=TaskRepository(store), users=UserRepository(store))
