"""
Result type for fallible collaborator calls.

AI extraction and other I/O-bound collaborators return a Result instead of
raising, so the structuring core only ever sees a value or an error message.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of a fallible call.

    Attributes:
        value: Payload on success (None on failure)
        error: Human-readable failure reason (None on success)
    """

    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value, error=None)

    @classmethod
    def failure(cls, error: str) -> "Result[T]":
        return cls(value=None, error=error or "unknown error")

    def unwrap_or(self, default: Optional[T] = None) -> Optional[T]:
        """Return the value on success, otherwise default."""
        return self.value if self.ok else default
