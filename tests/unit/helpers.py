"""Helpers shared by unit tests."""

import json
from typing import Any

from tasktracker.core.persistence_store import PersistenceStore


def read_collection_file(store: PersistenceStore, collection: str) -> dict[str, Any]:
    """Parse a collection file straight from disk."""
    return json.loads(store.path_for(collection).read_text(encoding="utf-8"))
