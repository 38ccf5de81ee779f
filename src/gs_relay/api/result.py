"""Success/failure envelope for remote control API calls.

Every client call yields exactly one of:

Success: Result(ok=True, data=<parsed payload>, error=None)
Failure: Result(ok=False, data=None, error="<human-readable message>")

``ok`` always decides which one it is. Operations with no payload (delete)
succeed as Result[None] with ok=True and data=None; that is still a success,
never the absence of an outcome.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of one remote call: payload on success, error message on failure."""

    ok: bool
    data: T | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.ok and self.error is not None:
            msg = "A successful result cannot carry an error."
            raise ValueError(msg)
        if not self.ok and (self.data is not None or not self.error):
            msg = "A failed result must carry a non-empty error and no data."
            raise ValueError(msg)

    @staticmethod
    def success(data: U) -> Result[U]:
        """Build a success result."""
        return Result(ok=True, data=data)

    @staticmethod
    def fail(error: str) -> Result[U]:
        """Build a failure result."""
        return Result(ok=False, error=error)

    def unwrap(self) -> T:
        """Return the payload of a successful result.

        Raises:
            ValueError: The result is a failure.

        """
        if not self.ok:
            msg = f"Cannot unwrap a failed result: {self.error}"
            raise ValueError(msg)
        return self.data  # type: ignore[return-value]
