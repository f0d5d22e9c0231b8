"""Result type for attempt outcomes.

A discriminated union of success (Ok) and failure (Err). The engine produces
exactly one per attempt and uses it to settle the session future.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar, cast

if TYPE_CHECKING:
    import asyncio

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


class Result(Generic[T, E]):
    """Success or failure of a single attempt.

    Examples:
        >>> Ok(42).is_ok()
        True
        >>> Err(ValueError("boom")).is_err()
        True
    """

    __slots__ = ("_value", "_is_ok")

    def __init__(self, value: T | E, is_ok: bool) -> None:
        """Private constructor. Use Ok() or Err() instead."""
        self._value: T | E = value
        self._is_ok: bool = is_ok

    def is_ok(self) -> bool:
        return self._is_ok

    def is_err(self) -> bool:
        return not self._is_ok

    def settle(self, future: asyncio.Future[T]) -> bool:
        """Resolve or reject ``future`` with this outcome.

        Returns False (and leaves the future alone) if it already settled,
        so the first settlement always wins.
        """
        if future.done():
            return False
        if self._is_ok:
            future.set_result(cast(T, self._value))
        else:
            future.set_exception(cast(BaseException, self._value))
        return True

    def __repr__(self) -> str:
        return f"{'Ok' if self._is_ok else 'Err'}({self._value!r})"


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    """Construct the success variant."""
    return Result(value, is_ok=True)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    """Construct the failure variant."""
    return Result(error, is_ok=False)


AttemptOutcome = Result[T, BaseException]
