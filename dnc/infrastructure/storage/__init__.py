"""Storage infrastructure.

Filesystem persistence for task tree aggregates, using Result values
for explicit error handling.
"""

from dnc.infrastructure.storage.json_storage import JsonStorage
from dnc.infrastructure.storage.repositories import TASK_FILE_NAME, TaskTreeRepository

__all__ = [
    "JsonStorage",
    "TaskTreeRepository",
    "TASK_FILE_NAME",
]
