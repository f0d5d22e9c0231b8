"""Operation scheduler: decides whether and when the next attempt runs.

The engine talks to the scheduler only through the Scheduler protocol:

    attempt(fn)      drive attempts, calling fn(1), fn(2), ...
    retry(error)     record a failure; True if another attempt is granted
    stop()           refuse every further attempt
    main_error()     the error that best describes the failures so far

RetryOperation is the default implementation. It precomputes one delay per
allowed retry from a Backoff strategy and sleeps between attempts.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Awaitable, Callable, Protocol, runtime_checkable

from persevere.foundation.errors import RetryTimeoutError

from .backoff import Backoff, ExponentialBackoff

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .options import RetryOptions


logger = logging.getLogger("persevere.scheduler")

AttemptFn = Callable[[int], Awaitable[None]]


@runtime_checkable
class Scheduler(Protocol):
    """Protocol for attempt schedulers."""

    async def attempt(self, fn: AttemptFn) -> None: ...
    def retry(self, error: BaseException) -> bool: ...
    def stop(self) -> None: ...
    def main_error(self) -> BaseException | None: ...


def compute_timeouts(backoff: Backoff, retries: int, *, forever: bool = False) -> list[float]:
    """Delays for each allowed retry, ascending.

    With ``forever`` and no budget a single delay is still produced so the
    scheduler has something to repeat.
    """
    timeouts = [backoff.delay(n) for n in range(retries)]
    if forever and not timeouts:
        timeouts.append(backoff.delay(retries))
    return sorted(timeouts)


class RetryOperation:
    """Default scheduler.

    Args:
        timeouts: Delay in seconds before each retry, consumed in order
        forever: Reuse the last delay once ``timeouts`` is exhausted
        max_retry_time: Refuse retries once this many seconds have passed
            since the first attempt
        clock: Monotonic time source
        sleep: Coroutine used to wait between attempts

    Example:
        >>> op = RetryOperation([0.1, 0.2, 0.4])
        >>> async def run(attempt: int) -> None:
        ...     try:
        ...         await flaky()
        ...     except ConnectionError as e:
        ...         op.retry(e)
        >>> await op.attempt(run)
    """

    __slots__ = (
        "_timeouts", "_cached_timeouts", "_max_retry_time", "_errors", "_attempts",
        "_operation_start", "_pending", "_stopped", "_clock", "_sleep",
    )

    def __init__(
        self,
        timeouts: Sequence[float],
        *,
        forever: bool = False,
        max_retry_time: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    ) -> None:
        self._timeouts: deque[float] = deque(timeouts)
        self._cached_timeouts: tuple[float, ...] | None = tuple(timeouts) if forever else None
        self._max_retry_time = max_retry_time if max_retry_time is not None else float("inf")
        self._errors: list[BaseException] = []
        self._attempts = 1
        self._operation_start: float | None = None
        self._pending: float | None = None
        self._stopped = False
        self._clock = clock
        self._sleep = sleep

    @classmethod
    def from_options(cls, options: RetryOptions) -> RetryOperation:
        """Build from session options; ``options.backoff`` wins over the exponential parameters."""
        backoff = options.backoff or ExponentialBackoff(
            min_timeout=options.min_timeout,
            max_timeout=options.max_timeout,
            factor=options.factor,
            randomize=options.randomize,
        )
        return cls(
            compute_timeouts(backoff, options.retries, forever=options.forever),
            forever=options.forever,
            max_retry_time=options.max_retry_time,
        )

    @property
    def attempts(self) -> int:
        """Number of the current (or last) attempt."""
        return self._attempts

    @property
    def stopped(self) -> bool:
        return self._stopped

    def errors(self) -> list[BaseException]:
        """Recorded errors, oldest first."""
        return list(self._errors)

    async def attempt(self, fn: AttemptFn) -> None:
        """Call fn with successive attempt numbers while retries are granted."""
        self._operation_start = self._clock()
        while True:
            self._pending = None
            await fn(self._attempts)
            delay, self._pending = self._pending, None
            if delay is None or self._stopped:
                return
            logger.debug(f"Attempt {self._attempts + 1} scheduled in {delay:.3f}s")
            await self._sleep(delay)
            if self._stopped:
                return
            self._attempts += 1

    def retry(self, error: BaseException) -> bool:
        """Record ``error`` and decide whether another attempt may run."""
        started = self._operation_start if self._operation_start is not None else self._clock()
        if self._clock() - started >= self._max_retry_time:
            self._errors.append(error)
            self._errors.insert(0, RetryTimeoutError())
            return False

        self._errors.append(error)
        if self._timeouts:
            timeout = self._timeouts.popleft()
        elif self._cached_timeouts:
            del self._errors[:-1]
            timeout = self._cached_timeouts[-1]
        else:
            return False

        self._pending = timeout
        return True

    def stop(self) -> None:
        """Refuse further attempts, including one already waiting on its delay."""
        self._timeouts.clear()
        self._cached_timeouts = None
        self._pending = None
        self._stopped = True

    def main_error(self) -> BaseException | None:
        """Most frequent recorded error by message; the latest one wins ties."""
        counts: dict[str, int] = {}
        main: BaseException | None = None
        main_count = 0
        for error in self._errors:
            message = str(error)
            counts[message] = count = counts.get(message, 0) + 1
            if count >= main_count:
                main, main_count = error, count
        return main

    def __repr__(self) -> str:
        return (
            f"RetryOperation(attempts={self._attempts}, pending={len(self._timeouts)}, "
            f"stopped={self._stopped})"
        )
