"""Error taxonomy for the task tree store.

Errors are exception classes so interface code can raise them, but the
domain, storage and application layers hand them around inside ``Err``
values. Every error carries the offending identifier or field name so
callers can build an actionable message.
"""


class DncError(Exception):
    """Base class for all task tree errors.

    Attributes:
        message: Human readable description of the failure.
        field: Identifier or field name the failure refers to, if any.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        return self.message


class ValidationError(DncError):
    """Bad identifier, status, or empty required field. Never retried."""


class NotFoundError(DncError):
    """A root aggregate or a node inside it does not exist."""


class ConflictError(DncError):
    """An identifier that must be new already exists."""


class CorruptDataError(DncError):
    """A persisted document could not be parsed as a task tree."""


class StorageIOError(DncError):
    """The underlying filesystem failed. Callers may retry."""


# Errors a repository operation can return
StoreError = NotFoundError | CorruptDataError | StorageIOError
