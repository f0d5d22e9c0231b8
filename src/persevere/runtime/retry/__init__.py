"""Retry engine, scheduler and options.

Example:
    >>> from persevere.runtime.retry import retry, AbortError
    >>>
    >>> async def get_page(attempt: int) -> str:
    ...     resp = await client.get("https://example.com")
    ...     if resp.status_code == 404:
    ...         raise AbortError(resp.reason_phrase)  # don't retry
    ...     resp.raise_for_status()
    ...     return resp.text
    >>>
    >>> text = await retry(get_page, retries=5, on_failed_attempt=log_attempt)
"""

from persevere.foundation.errors import AbortError, FailedAttemptError

from .backoff import Backoff, ConstantBackoff, ExponentialBackoff
from .classify import Classification, FailureKind, classify_failure
from .decorator import retrying
from .engine import Operation, RetrySession, retry
from .options import (
    NetworkErrorClassifier,
    OnFailedAttempt,
    RetryOptions,
    ShouldRetry,
    merge_options,
)
from .scheduler import AttemptFn, RetryOperation, Scheduler, compute_timeouts

__all__ = [
    # Engine
    "retry",
    "retrying",
    "RetrySession",
    "Operation",
    "AbortError",
    "FailedAttemptError",
    # Classification
    "FailureKind",
    "Classification",
    "classify_failure",
    # Options
    "RetryOptions",
    "merge_options",
    "OnFailedAttempt",
    "ShouldRetry",
    "NetworkErrorClassifier",
    # Scheduler
    "Scheduler",
    "RetryOperation",
    "AttemptFn",
    "compute_timeouts",
    # Backoff strategies
    "Backoff",
    "ExponentialBackoff",
    "ConstantBackoff",
]
