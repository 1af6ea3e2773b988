"""Result type for operations that can fail in expected ways.

Store and service operations return ``Ok(value)`` or ``Err(error)``
instead of raising, so callers such as the batch coordinator can turn a
failed load into a per-request outcome without unwinding the whole call.

Example usage:
    >>> result = repository.load("proj-x")
    >>> if is_ok(result):
    ...     print(result.value.goal)
    ... else:
    ...     print(f"Could not load: {result.error}")
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying ``value``."""

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result carrying ``error``."""

    error: E


# Union instead of | because TypeVar aliases need it at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is an Ok."""
    return isinstance(result, Ok)


def is_err(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is an Err."""
    return isinstance(result, Err)


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Transform the value of an Ok, passing an Err through untouched.

    Args:
        result: The result to transform.
        fn: Function applied to the Ok value.

    Returns:
        Ok(fn(value)) or the original Err.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def flat_map(result: Ok[T] | Err[E], fn: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
    """Chain a second fallible step onto an Ok.

    Used to sequence load -> mutate -> save without nested checks.

    Args:
        result: The result to chain from.
        fn: Step that takes the Ok value and returns a new Result.

    Returns:
        The Result of fn, or the original Err.
    """
    if isinstance(result, Ok):
        return fn(result.value)
    return result
