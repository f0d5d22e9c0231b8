"""Runtime - Execution flow, control, and monitoring.

Contains: retry engine, scheduler, cancellation signals, logging.
"""

from __future__ import annotations

__all__ = [
    # Retry
    "RetrySession", "RetryOptions", "merge_options", "retrying",
    "FailureKind", "Classification", "classify_failure",
    "Scheduler", "RetryOperation", "compute_timeouts",
    "Backoff", "ExponentialBackoff", "ConstantBackoff",
    # Concurrency
    "AbortController", "AbortSignal",
    # Observability
    "configure_logging", "JsonFormatter",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("RetrySession", "RetryOptions", "merge_options", "retrying",
                "FailureKind", "Classification", "classify_failure",
                "Scheduler", "RetryOperation", "compute_timeouts",
                "Backoff", "ExponentialBackoff", "ConstantBackoff"):
        from . import retry
        return getattr(retry, name)

    if name in ("AbortController", "AbortSignal"):
        from . import concurrency
        return getattr(concurrency, name)

    if name in ("configure_logging", "JsonFormatter"):
        from . import observability
        return getattr(observability, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
