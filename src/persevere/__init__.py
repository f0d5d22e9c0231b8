"""Persevere - Retry async operations with a policy you control.

Retries a fallible operation, telling transient failures apart from fatal
ones, with hooks to observe each failed attempt, veto further retries, or
cancel the whole loop from outside.

Quick Start:
    >>> from persevere import retry
    >>>
    >>> async def fetch(attempt: int) -> dict:
    ...     resp = await client.get("https://api.example.com/items")
    ...     resp.raise_for_status()
    ...     return resp.json()
    >>>
    >>> items = await retry(fetch, retries=5)

Stopping early:
    >>> from persevere import AbortError
    >>>
    >>> async def fetch(attempt: int) -> dict:
    ...     resp = await client.get(url)
    ...     if resp.status_code == 404:
    ...         raise AbortError(resp.reason_phrase)  # rejects at once
    ...     return resp.json()

Observing and vetoing:
    >>> async def report(error: FailedAttemptError) -> None:
    ...     print(f"Attempt {error.attempt_number} failed. {error.retries_left} retries left.")
    >>>
    >>> await retry(fetch, on_failed_attempt=report, should_retry=lambda e: not isinstance(e.cause, KeyError))

Cancellation:
    >>> controller = AbortController()
    >>> task = asyncio.create_task(retry(fetch, signal=controller.signal))
    >>> controller.abort(RuntimeError("User clicked cancel"))

Configuration (environment):
    PERSEVERE_RETRY_RETRIES=3
    PERSEVERE_RETRY_MIN_TIMEOUT=0.5
    PERSEVERE_LOG_LEVEL=INFO
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .foundation.errors import (
    AbortError,
    ErrorKind,
    FailedAttemptError,
    RetryCancelled,
    RetryTimeoutError,
    is_network_error,
)

# Config
from .foundation.config import get_settings

# Cancellation
from .runtime.concurrency import AbortController, AbortSignal

# Retry
from .runtime.retry import (
    ConstantBackoff,
    ExponentialBackoff,
    FailureKind,
    RetryOperation,
    RetryOptions,
    Scheduler,
    classify_failure,
    merge_options,
    retry,
    retrying,
)

# Logging
from .runtime.observability import configure_logging

__all__ = [
    "__version__",
    # Retry
    "retry",
    "retrying",
    "RetryOptions",
    "merge_options",
    "FailureKind",
    "classify_failure",
    "Scheduler",
    "RetryOperation",
    "ExponentialBackoff",
    "ConstantBackoff",
    # Errors
    "AbortError",
    "FailedAttemptError",
    "RetryCancelled",
    "RetryTimeoutError",
    "ErrorKind",
    "is_network_error",
    # Cancellation
    "AbortController",
    "AbortSignal",
    # Config & logging
    "get_settings",
    "configure_logging",
]
