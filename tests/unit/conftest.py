"""Pytest configuration and fixtures for unit tests."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from tasktracker.core.persistence_store import PersistenceStore
from tasktracker.services.task_repository import TaskRepository
from tasktracker.services.user_repository import UserRepository


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory that does not exist yet."""
    return tmp_path / "data"


@pytest.fixture
def store(data_dir: Path) -> PersistenceStore:
    """Provides a PersistenceStore over a fresh temporary directory."""
    return PersistenceStore(data_dir)


@pytest.fixture
async def task_repo(store: PersistenceStore) -> TaskRepository:
    """Provides an initialized, empty TaskRepository."""
    repo = TaskRepository(store)
    await repo.initialize()
    return repo


@pytest.fixture
async def user_repo(store: PersistenceStore) -> UserRepository:
    """Provides an initialized, empty UserRepository."""
    repo = UserRepository(store)
    await repo.initialize()
    return repo


@pytest.fixture
def break_saves(monkeypatch: pytest.MonkeyPatch) -> Callable[[], None]:
    """Returns a switch that makes every later save fail at the final rename."""

    def fail_replace(*args, **kwargs):
        raise OSError("No space left on device")

    def install() -> None:
        monkeypatch.setattr(os, "replace", fail_replace)

    return install
