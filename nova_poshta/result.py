"""Result variants returned by every client operation."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

T = TypeVar("T")

UNKNOWN_ERROR = "Unknown error occurred."


class DecodeError(ValueError):
    """Raised when a provider response does not have the expected shape."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful call carrying its decoded data."""

    data: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """A failed call carrying the provider's (or our own) error messages."""

    errors: list[str] = field(default_factory=lambda: [UNKNOWN_ERROR])

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]
