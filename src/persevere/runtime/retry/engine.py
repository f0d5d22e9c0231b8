"""Retry decision engine.

Runs an operation under a RetrySession:

    Attempting  -> Succeeded | Classifying
    Classifying -> FatalReject | Evaluating
    Evaluating  -> VetoedReject | ObserverAborted | Exhausted | Retrying -> Attempting

The session owns a future settled exactly once. The scheduler drives attempts
in a separate task; a cancellation signal can settle the future from outside
at any suspension point, and whichever settlement comes first wins.

Example:
    >>> async def fetch(attempt: int) -> bytes:
    ...     resp = await client.get(url)
    ...     resp.raise_for_status()
    ...     return resp.content
    >>>
    >>> body = await retry(fetch, retries=5, on_failed_attempt=lambda e: print(e.attempt_number))
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, TypeVar

from persevere.foundation.errors import Err, ErrorKind, FailedAttemptError, Ok

from .classify import classify_failure
from .options import RetryOptions, merge_options
from .scheduler import RetryOperation, Scheduler

if TYPE_CHECKING:
    from persevere.foundation.errors import AttemptOutcome

logger = logging.getLogger("persevere.retry")

T = TypeVar("T")
R = TypeVar("R")

Operation = Callable[[int], Awaitable[T] | T]

# Never classified; they propagate like in any other coroutine
_PASSTHROUGH: tuple[type[BaseException], ...] = (
    asyncio.CancelledError, KeyboardInterrupt, SystemExit, GeneratorExit,
)


async def _resolve(value: Awaitable[R] | R) -> R:
    return await value if inspect.isawaitable(value) else value  # type: ignore[return-value]


class RetrySession(Generic[T]):
    """State of one ``retry`` call.

    Lives from ``run()`` until the returned value or exception is produced.
    On every exit path the signal listener is removed, the scheduler is
    stopped and an in-flight attempt is cancelled.
    """

    __slots__ = ("_operation", "_options", "_scheduler", "_outcome", "_driver")

    def __init__(self, operation: Operation[T], options: RetryOptions) -> None:
        self._operation = operation
        self._options = options
        factory = options.scheduler_factory or RetryOperation.from_options
        self._scheduler: Scheduler = factory(options)
        self._outcome: asyncio.Future[T] | None = None
        self._driver: asyncio.Task[None] | None = None

    @property
    def options(self) -> RetryOptions:
        return self._options

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    async def run(self) -> T:
        """Run attempts until the session settles."""
        if self._outcome is not None:
            raise RuntimeError("RetrySession.run() may only be called once")
        signal = self._options.signal
        if signal is not None and signal.aborted:
            logger.info(f"Not starting ({ErrorKind.CANCELLED}): signal already aborted")
            self._scheduler.stop()
            signal.throw_if_aborted()

        loop = asyncio.get_running_loop()
        self._outcome = loop.create_future()
        if signal is not None:
            signal.add_listener(self._on_abort)

        self._driver = loop.create_task(self._scheduler.attempt(self._run_attempt))
        self._driver.add_done_callback(self._on_driver_done)
        try:
            return await self._outcome
        finally:
            self._cleanup()
            if not self._driver.done():
                self._driver.cancel()

    # ─────────────────────────────────────────────────────────────────
    # Attempt runner
    # ─────────────────────────────────────────────────────────────────

    async def _run_attempt(self, attempt_number: int) -> None:
        try:
            value = await _resolve(self._operation(attempt_number))
        except _PASSTHROUGH:
            raise
        except BaseException as raised:  # non-Exception raises are classified too
            await self._handle_failure(raised, attempt_number)
        else:
            self._cleanup()
            if self._settle(Ok(value)):
                logger.debug(f"Attempt {attempt_number} succeeded")

    async def _handle_failure(self, raised: BaseException, attempt_number: int) -> None:
        if self._outcome is None or self._outcome.done():
            logger.debug(f"Attempt {attempt_number} failed after the session settled: {raised!r}")
            return
        try:
            await self._evaluate(raised, attempt_number)
        except _PASSTHROUGH:
            raise
        except Exception as final:
            self._cleanup()
            self._settle(Err(FailedAttemptError(
                final,
                attempt_number=attempt_number,
                retries_left=self._options.retries_left(attempt_number),
            )))

    # ─────────────────────────────────────────────────────────────────
    # Retry policy
    # ─────────────────────────────────────────────────────────────────

    async def _evaluate(self, raised: BaseException, attempt_number: int) -> None:
        """Decide what follows a failed attempt.

        Returns normally when another attempt was granted or the session was
        vetoed; raises the error the session must reject with otherwise.
        """
        classification = classify_failure(raised, self._options.is_network_error)
        error = classification.error
        if not classification.retryable:
            logger.info(
                f"Attempt {attempt_number} failed ({classification.kind.error_kind}), not retrying: {error!r}"
            )
            raise error

        record = FailedAttemptError(
            error,
            attempt_number=attempt_number,
            retries_left=self._options.retries_left(attempt_number),
        )

        if not await _resolve(self._options.should_retry(record)):
            logger.info(f"Attempt {attempt_number} failed ({ErrorKind.VETOED}): {error!r}")
            self._cleanup()
            self._settle(Err(error))
            return

        try:
            await _resolve(self._options.on_failed_attempt(record))
        except Exception as exc:
            logger.info(f"Attempt {attempt_number}: on_failed_attempt raised ({ErrorKind.OBSERVER_ERROR}): {exc!r}")
            raise

        if not self._scheduler.retry(error):
            final = self._scheduler.main_error() or error
            logger.warning(f"Giving up after {attempt_number} attempts ({ErrorKind.BUDGET_EXHAUSTED}): {final!r}")
            raise final

        logger.info(
            f"Attempt {attempt_number} failed ({classification.kind.error_kind}): {error!r}. "
            f"{record.retries_left} retries left"
        )

    # ─────────────────────────────────────────────────────────────────
    # Settlement & teardown
    # ─────────────────────────────────────────────────────────────────

    def _settle(self, outcome: AttemptOutcome[T]) -> bool:
        return self._outcome is not None and outcome.settle(self._outcome)

    def _on_abort(self, reason: BaseException) -> None:
        logger.info(f"Retry session cancelled ({ErrorKind.CANCELLED}): {reason!r}")
        self._scheduler.stop()
        self._settle(Err(reason))

    def _on_driver_done(self, task: asyncio.Task[None]) -> None:
        error = None if task.cancelled() else task.exception()
        if self._outcome is None or self._outcome.done():
            return
        if task.cancelled():
            self._outcome.cancel()  # CancelledError raised by the operation itself
            return
        self._settle(Err(error or RuntimeError("Scheduler finished without settling the retry session")))

    def _cleanup(self) -> None:
        if self._options.signal is not None:
            self._options.signal.remove_listener(self._on_abort)
        self._scheduler.stop()


async def retry(
    operation: Operation[T],
    options: RetryOptions | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> T:
    """Run ``operation`` until it succeeds or the retry policy gives up.

    Args:
        operation: Called with the 1-based attempt number; may return a value
            or an awaitable
        options: RetryOptions or mapping of option names
        **overrides: Individual options, applied last

    Returns:
        The value of the first successful attempt

    Raises:
        FailedAttemptError: Fatal error, exhausted budget, or raising observer;
            ``cause`` holds the underlying error
        Exception: The original error when ``should_retry`` returned False,
            or the signal's reason when cancelled
    """
    return await RetrySession(operation, merge_options(options, **overrides)).run()
