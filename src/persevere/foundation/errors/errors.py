"""Exception types surfaced by the retry engine.

- AbortError: raised by an operation to stop retrying immediately
- FailedAttemptError: per-attempt record handed to observers, also the
  terminal rejection for classified failure paths
- RetryCancelled: default reason carried by an aborted signal
- RetryTimeoutError: recorded by the scheduler when max_retry_time elapses
- ErrorKind: taxonomy of every way a retry session can end in failure
"""

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    """How a failure was handled by the engine.

    Used for logging and for programmatic inspection of terminal errors.
    """
    NON_ERROR = "NON_ERROR"
    ABORT_REQUESTED = "ABORT_REQUESTED"
    PROGRAMMER_ERROR = "PROGRAMMER_ERROR"
    NETWORK_TYPE_ERROR = "NETWORK_TYPE_ERROR"
    TRANSIENT = "TRANSIENT"
    VETOED = "VETOED"
    OBSERVER_ERROR = "OBSERVER_ERROR"
    BUDGET_EXHAUSTED = "BUDGET_EXHAUSTED"
    CANCELLED = "CANCELLED"


class AbortError(Exception):
    """Raise from an operation to stop retrying.

    The session rejects with ``original_error`` (decorated with attempt
    metadata) even if retries remain. ``should_retry`` and
    ``on_failed_attempt`` are not consulted.

    Example:
        >>> async def fetch_user(attempt: int) -> dict:
        ...     resp = await client.get("/user")
        ...     if resp.status_code == 404:
        ...         raise AbortError(resp.reason_phrase)
        ...     return resp.json()
    """

    __slots__ = ("original_error",)

    def __init__(self, message: str | BaseException) -> None:
        if isinstance(message, BaseException):
            self.original_error = message
            message = str(message)
        else:
            self.original_error = Exception(message)
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class FailedAttemptError(Exception):
    """Metadata describing one failed attempt.

    Attributes:
        cause: The error raised by the attempt (also set as ``__cause__``)
        attempt_number: 1-based number of the attempt that failed
        retries_left: ``retries - (attempt_number - 1)``
    """

    __slots__ = ("cause", "attempt_number", "retries_left")

    def __init__(self, cause: BaseException, *, attempt_number: int = 0, retries_left: int = 0) -> None:
        super().__init__(str(cause))
        self.cause = cause
        self.attempt_number = attempt_number
        self.retries_left = retries_left
        self.__cause__ = cause

    def __repr__(self) -> str:
        return (
            f"FailedAttemptError({self.cause!r}, attempt_number={self.attempt_number}, "
            f"retries_left={self.retries_left})"
        )


class RetryCancelled(Exception):
    """Default reason of an aborted signal."""

    def __init__(self, message: str = "This operation was aborted") -> None:
        super().__init__(message)


class RetryTimeoutError(Exception):
    """The scheduler's max_retry_time elapsed."""

    def __init__(self, message: str = "RetryOperation timeout occurred") -> None:
        super().__init__(message)


def non_error_raised(value: BaseException) -> TypeError:
    """Build the fatal error reported when an operation raises a non-Exception."""
    return TypeError(f'Non-error was thrown: "{value}". You should only throw errors.')
