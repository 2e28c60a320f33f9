"""Atomic JSON-file persistence for named collections."""

import json
import logging
import os
import re
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from tasktracker.core.config import constants
from tasktracker.core.errors import StorageError


logger = logging.getLogger(__name__)


def _validate_collection_name(collection: str) -> None:
    """Validate that a collection name contains only alphanumeric characters and underscores."""
    if not re.match(r"^[a-zA-Z_][a-zA-Z0-9_]*$", collection):
        msg = f"Invalid collection name: {collection}. Only alphanumeric characters and underscores are allowed."
        raise StorageError(msg)


def _utc_now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class PersistenceStore:
    """Load and save whole collections, one pretty-printed JSON file per collection.

    File layout::

        {
          "<collection>": [ <record>, ... ],
          "lastModified": "<ISO-8601 timestamp>"
        }

    Saves go through a temporary sibling file that is renamed over the target,
    so a reader never sees a truncated file. Other processes must not read the
    temporary file.
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path:
        """Return the backing file path for a collection."""
        _validate_collection_name(collection)
        return self.data_dir / f"{collection}.json"

    def ensure_data_dir(self) -> None:
        """Create the data directory if it does not exist.

        Raises:
            StorageError: If the directory cannot be created
        """
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("ensure_data_dir_failed", extra={"data_dir": str(self.data_dir), "error": str(e)})
            msg = f"Failed to create data directory {self.data_dir}: {e}"
            raise StorageError(msg) from e

    def _read_document(self, collection: str) -> dict[str, Any] | None:
        """Read and parse the backing file.

        Returns None when the file is missing or its content is malformed.
        """
        path = self.path_for(collection)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            logger.warning(
                "Undecodable collection file, treating as empty",
                extra={"collection": collection, "path": str(path), "error": str(e)},
            )
            return None
        except OSError as e:
            logger.error("load_failed", extra={"collection": collection, "path": str(path), "error": str(e)})
            msg = f"Failed to read {collection} from {path}: {e}"
            raise StorageError(msg) from e

        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(
                "Invalid JSON in collection file, treating as empty",
                extra={"collection": collection, "path": str(path), "error": str(e)},
            )
            return None

        if not isinstance(document, dict):
            logger.warning(
                "Collection file is not a JSON object, treating as empty",
                extra={"collection": collection, "path": str(path)},
            )
            return None

        return document

    def load(self, collection: str) -> list[dict[str, Any]]:
        """Load the raw records of a collection.

        Args:
            collection: Collection name, also the top-level key in the file

        Returns:
            The stored records in file order, or an empty list when the file is
            missing or malformed

        Raises:
            StorageError: If the file exists but cannot be read
        """
        document = self._read_document(collection)
        if document is None:
            return []

        records = document.get(collection)
        if not isinstance(records, list):
            logger.warning(
                "Invalid collection structure, treating as empty",
                extra={"collection": collection, "path": str(self.path_for(collection))},
            )
            return []

        logger.info("Loaded collection", extra={"collection": collection, "count": len(records)})
        return records

    def last_modified(self, collection: str) -> datetime | None:
        """Return the lastModified stamp of a collection file, if readable."""
        document = self._read_document(collection)
        if document is None:
            return None

        stamp = document.get(constants.LAST_MODIFIED_KEY)
        if not isinstance(stamp, str):
            return None
        try:
            return datetime.fromisoformat(stamp.replace("Z", "+00:00"))
        except ValueError:
            return None

    def save(self, collection: str, records: list[dict[str, Any]]) -> None:
        """Atomically replace the stored collection.

        Args:
            collection: Collection name, also the top-level key in the file
            records: Full collection as plain JSON-serializable records

        Raises:
            StorageError: If the directory, temporary file or rename fails
        """
        path = self.path_for(collection)
        self.ensure_data_dir()

        document = {collection: list(records), constants.LAST_MODIFIED_KEY: _utc_now_iso()}
        try:
            content = json.dumps(document, ensure_ascii=False, indent=constants.JSON_INDENT)
        except (TypeError, ValueError) as e:
            msg = f"Collection {collection} is not JSON serializable: {e}"
            raise StorageError(msg) from e

        temp_path: Path | None = None
        try:
            fd, temp_name = tempfile.mkstemp(
                dir=self.data_dir,
                prefix=f".{collection}.",
                suffix=constants.TEMP_FILE_SUFFIX,
            )
            temp_path = Path(temp_name)
            try:
                f = os.fdopen(fd, "w", encoding="utf-8")
            except BaseException:
                os.close(fd)
                raise
            with f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            logger.error("save_failed", extra={"collection": collection, "path": str(path), "error": str(e)})
            msg = f"Failed to save {collection} to {path}: {e}"
            raise StorageError(msg) from e

        logger.info("Saved collection", extra={"collection": collection, "count": len(document[collection])})
