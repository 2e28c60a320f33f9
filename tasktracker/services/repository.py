"""Generic in-memory collection kept in sync with a PersistenceStore file.

Concurrency model: one asyncio event loop, one process. Every mutation of a
repository holds that repository's lock, and contains no await point between
validation, mutation and persistence, so concurrent callers on the same loop
are serialized per collection. Reads return snapshots. Two repositories must
never share a backing file.
"""

import asyncio
import logging
from collections.abc import Callable, Hashable, Mapping
from typing import Any, ClassVar, Generic, Protocol, Self, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from tasktracker.core.errors import ValidationError
from tasktracker.core.logging import log_with_context, span
from tasktracker.core.persistence_store import PersistenceStore


logger = logging.getLogger(__name__)


class Entity(Protocol):
    """Shape shared by Task and User."""

    @property
    def id(self) -> Any: ...

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Self: ...

    def to_record(self) -> dict[str, Any]: ...


EntityT = TypeVar("EntityT", bound=Entity)
IdT = TypeVar("IdT", bound=Hashable)
PayloadT = TypeVar("PayloadT", bound=BaseModel)


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Turn the first pydantic error into a human-readable reason."""
    error = exc.errors()[0]
    if error["type"] == "value_error":
        return str(error["ctx"]["error"])
    field = ".".join(str(part) for part in error["loc"])
    return f"{field}: {error['msg']}" if field else error["msg"]


def parse_payload(model: type[PayloadT], data: PayloadT | Mapping[str, Any]) -> PayloadT:
    """Validate caller data against a payload model.

    Raises:
        ValidationError: If any supplied field is invalid
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_error(e)) from e


class EntityRepository(Generic[EntityT, IdT]):
    """In-memory ordered collection of one entity type, persisted after every mutation.

    Subclasses set ``collection`` and ``entity_type`` and implement ``add`` and
    ``update`` with their own validation. ``initialize()`` must be awaited once
    before any other operation.
    """

    collection: ClassVar[str]
    entity_type: ClassVar[type[Any]]

    def __init__(self, store: PersistenceStore) -> None:
        self._store = store
        self._items: list[EntityT] = []
        self._lock = asyncio.Lock()
        self._initialized = False

    @property
    def _span_prefix(self) -> str:
        return f"{self.collection}_repository"

    def _require_initialized(self) -> None:
        if not self._initialized:
            msg = f"{type(self).__name__}.initialize() must be awaited before use"
            raise RuntimeError(msg)

    def _index_of(self, entity_id: IdT) -> int | None:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    def _rebuild(self, records: list[Any]) -> list[EntityT]:
        """Reconstruct typed entities from raw records.

        Records that do not reconstruct, and later records repeating an id,
        are skipped with a warning; the valid records are kept.
        """
        items: list[EntityT] = []
        seen: set[IdT] = set()
        for position, record in enumerate(records):
            try:
                item = self.entity_type.from_record(record)
            except PydanticValidationError as e:
                logger.warning(
                    "Skipping corrupt record",
                    extra={"collection": self.collection, "position": position, "error": describe_validation_error(e)},
                )
                continue
            if item.id in seen:
                logger.warning(
                    "Skipping record with duplicate id",
                    extra={"collection": self.collection, "position": position, "error": f"duplicate id {item.id!r}"},
                )
                continue
            seen.add(item.id)
            items.append(item)
        return items

    def _on_loaded(self) -> None:
        """Derive identifier state from the freshly loaded collection."""

    def _persist(self) -> None:
        self._store.save(self.collection, [item.to_record() for item in self._items])

    async def initialize(self) -> None:
        """Hydrate the in-memory collection from disk.

        Raises:
            StorageError: If the file exists but cannot be read
        """
        with span(f"{self._span_prefix}.initialize"):
            async with self._lock:
                records = self._store.load(self.collection)
                self._items = self._rebuild(records)
                self._on_loaded()
                self._initialized = True

            log_with_context(
                logger, "info", "Repository initialized", collection=self.collection, count=len(self._items)
            )

    async def get_by_id(self, entity_id: IdT) -> EntityT | None:
        """Return the entity with this id, or None."""
        self._require_initialized()
        index = self._index_of(entity_id)
        return None if index is None else self._items[index]

    async def get_all(self) -> list[EntityT]:
        """Return a new list of every entity, in insertion order."""
        self._require_initialized()
        return list(self._items)

    async def count(self) -> int:
        self._require_initialized()
        return len(self._items)

    async def delete(self, entity_id: IdT) -> bool:
        """Remove an entity and persist.

        Returns:
            True if an entity was removed, False if none had this id

        Raises:
            StorageError: If persisting fails (memory already reflects the removal)
        """
        with span(f"{self._span_prefix}.delete"):
            async with self._lock:
                self._require_initialized()
                index = self._index_of(entity_id)
                if index is None:
                    return False

                self._items.pop(index)
                self._persist()

            log_with_context(logger, "info", "Deleted record", collection=self.collection, record_id=entity_id)
            return True

    async def _select(self, predicate: Callable[[EntityT], bool]) -> list[EntityT]:
        self._require_initialized()
        return [item for item in list(self._items) if predicate(item)]
