"""Task identifier grammar.

Identifiers are short kebab-case names: lowercase ascii letters, digits
and single hyphens, at most 100 characters and 10 words. The same rules
apply to root ids (which also name directories on disk) and child ids.
"""

import re
from enum import Enum

from pydantic import BaseModel

from dnc.domain.shared import Err, Ok, Result, ValidationError

MAX_ID_LENGTH = 100
MAX_ID_WORDS = 10

_ALLOWED = re.compile(r"[a-z0-9-]+")


class IdRejection(str, Enum):
    """Which identifier rule failed."""

    EMPTY = "empty"
    BAD_CHARACTERS = "bad-characters"
    TOO_LONG = "too-long"
    TOO_MANY_WORDS = "too-many-words"
    HYPHEN_PLACEMENT = "hyphen-placement"


_MESSAGES = {
    IdRejection.EMPTY: "task ID cannot be empty",
    IdRejection.BAD_CHARACTERS: "task ID must contain only lowercase letters, numbers, and hyphens",
    IdRejection.TOO_LONG: f"task ID must be between 1 and {MAX_ID_LENGTH} characters",
    IdRejection.TOO_MANY_WORDS: f"task ID must not exceed {MAX_ID_WORDS} hyphen-separated words",
    IdRejection.HYPHEN_PLACEMENT: "task ID cannot start/end with a hyphen or contain consecutive hyphens",
}


class IdValidation(BaseModel):
    """Outcome of checking one identifier."""

    valid: bool
    reason: IdRejection | None = None
    message: str | None = None


def _reject(reason: IdRejection) -> IdValidation:
    return IdValidation(valid=False, reason=reason, message=_MESSAGES[reason])


def validate_task_id(task_id: str | None) -> IdValidation:
    """Check an identifier against the naming grammar.

    Rules are checked in a fixed order (empty, characters, length, word
    count, hyphen placement) and the first failure is reported.

    Args:
        task_id: Candidate identifier.

    Returns:
        IdValidation with ``valid=True``, or the failed rule and message.
    """
    if not task_id or not task_id.strip():
        return _reject(IdRejection.EMPTY)
    if not _ALLOWED.fullmatch(task_id):
        return _reject(IdRejection.BAD_CHARACTERS)
    if len(task_id) > MAX_ID_LENGTH:
        return _reject(IdRejection.TOO_LONG)
    words = [word for word in task_id.split("-") if word]
    if len(words) > MAX_ID_WORDS:
        return _reject(IdRejection.TOO_MANY_WORDS)
    if task_id.startswith("-") or task_id.endswith("-") or "--" in task_id:
        return _reject(IdRejection.HYPHEN_PLACEMENT)
    return IdValidation(valid=True)


def check_task_id(task_id: str | None, field: str = "id") -> Result[str, ValidationError]:
    """Validate an identifier and wrap the outcome in a Result.

    Args:
        task_id: Candidate identifier.
        field: Name of the argument being checked, used in the message.

    Returns:
        Ok(task_id) or Err(ValidationError) naming the field and rule.
    """
    outcome = validate_task_id(task_id)
    if outcome.valid:
        return Ok(task_id)
    return Err(ValidationError(f"Invalid {field} '{task_id or ''}': {outcome.message}", field=field))
