"""Shared domain building blocks.

- Result values (Ok / Err) for expected failures
- The error taxonomy carried inside Err values

Example usage:
    >>> from dnc.domain.shared import Err, NotFoundError, Ok
    >>>
    >>> def lookup(root_id: str):
    ...     if root_id == "missing":
    ...         return Err(NotFoundError("root not found: missing", field=root_id))
    ...     return Ok(root_id)
"""

from dnc.domain.shared.errors import (
    ConflictError,
    CorruptDataError,
    DncError,
    NotFoundError,
    StorageIOError,
    StoreError,
    ValidationError,
)
from dnc.domain.shared.result import (
    Err,
    Ok,
    Result,
    flat_map,
    is_err,
    is_ok,
    map_result,
)

__all__ = [
    # Result values
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "map_result",
    "flat_map",
    # Errors
    "DncError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "CorruptDataError",
    "StorageIOError",
    "StoreError",
]
