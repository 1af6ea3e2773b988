"""Repository for task tree aggregates.

One root aggregate is one directory under the data directory holding a
single ``task.json`` document:

    <data_dir>/<root-id>/task.json

Every operation returns a Result. Identifiers are expected to have been
validated by the caller (they become directory names).
"""

import logging
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from dnc.domain.shared import (
    CorruptDataError,
    Err,
    NotFoundError,
    Ok,
    Result,
    StorageIOError,
    StoreError,
    is_ok,
)
from dnc.domain.task import Task, migrate_pending
from dnc.infrastructure.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

TASK_FILE_NAME = "task.json"


class TaskTreeRepository:
    """Filesystem persistence for root task trees.

    Saves are full overwrites written atomically. Loads apply the legacy
    ``pending`` -> ``init`` migration before returning; the file itself
    is only corrected the next time the tree is saved.
    """

    def __init__(self, data_dir: Path, storage: JsonStorage | None = None) -> None:
        """Initialize the repository.

        Args:
            data_dir: Directory holding one subdirectory per root aggregate.
            storage: JsonStorage instance to use. Creates new one if not provided.
        """
        self.data_dir = Path(data_dir)
        self._storage = storage or JsonStorage()

    def _root_dir(self, root_id: str) -> Path:
        return self.data_dir / root_id

    def _task_file(self, root_id: str) -> Path:
        return self._root_dir(root_id) / TASK_FILE_NAME

    def ensure_ready(self) -> None:
        """Create the data directory if it does not exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def exists(self, root_id: str) -> bool:
        """Check if an aggregate is persisted for ``root_id``."""
        return self._task_file(root_id).is_file()

    def load(self, root_id: str) -> Result[Task, StoreError]:
        """Load a full tree.

        Args:
            root_id: ID of the root aggregate.

        Returns:
            Ok(Task) with legacy statuses migrated, Err(NotFoundError) if
            absent, Err(CorruptDataError) if the document is not a valid
            tree, Err(StorageIOError) on other I/O failures.
        """
        result = self._storage.load_json(self._task_file(root_id))
        if isinstance(result, Err):
            error = result.error
            if isinstance(error, NotFoundError):
                return Err(NotFoundError(f"root not found: {root_id}", field=root_id))
            logger.error(f"Failed to load task tree '{root_id}' from {error.field}: {error}")
            if isinstance(error, CorruptDataError):
                return Err(CorruptDataError(f"corrupt task tree: {root_id}: {error}", field=root_id))
            return Err(StorageIOError(f"cannot read task tree: {root_id}: {error}", field=root_id))

        try:
            tree = Task.model_validate(result.value)
        except PydanticValidationError as e:
            logger.error(f"Invalid task tree data for '{root_id}': {e}")
            return Err(
                CorruptDataError(
                    f"corrupt task tree: {root_id}: {e.error_count()} invalid field(s)",
                    field=root_id,
                )
            )

        migrated = migrate_pending(tree)
        if migrated:
            logger.debug(f"Migrated {migrated} pending node(s) to init in '{root_id}'")
        return Ok(tree)

    def save(self, root_id: str, tree: Task) -> Result[None, StoreError]:
        """Overwrite the aggregate for ``root_id`` with ``tree``.

        Args:
            root_id: ID of the root aggregate.
            tree: Tree to persist.

        Returns:
            Ok(None) if successful, Err(StorageIOError) otherwise.
        """
        result = self._storage.save_json(self._task_file(root_id), tree.to_document())
        if isinstance(result, Err):
            error = result.error
            logger.error(f"Failed to save task tree '{root_id}' to {error.field}: {error}")
            return Err(StorageIOError(f"cannot write task tree: {root_id}: {error}", field=root_id))
        logger.debug(f"Saved task tree '{root_id}'")
        return result

    def delete(self, root_id: str) -> Result[None, StoreError]:
        """Delete an aggregate and everything stored with it.

        Deleting an id that does not exist is not an error.
        """
        result = self._storage.remove_tree(self._root_dir(root_id))
        if is_ok(result):
            logger.info(f"Deleted task tree '{root_id}'")
            return result
        return Err(StorageIOError(f"cannot delete task tree: {root_id}: {result.error}", field=root_id))

    def list_ids(self) -> Result[list[str], StoreError]:
        """All persisted root ids, sorted. Empty when nothing is stored."""
        result = self._storage.list_dirs(self.data_dir)
        if isinstance(result, Err):
            return result
        return Ok([name for name in result.value if self.exists(name)])
