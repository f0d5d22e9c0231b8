"""Foundation - Core building blocks for persevere.

Contains: error types, attempt outcomes, network classifier, config.
"""

from __future__ import annotations

__all__ = [
    # Errors
    "AbortError", "FailedAttemptError", "RetryCancelled", "RetryTimeoutError",
    "ErrorKind", "non_error_raised",
    "Result", "Ok", "Err", "AttemptOutcome",
    "NETWORK_ERROR_MESSAGES", "is_network_error",
    # Config
    "PersevereSettings", "RetrySettings", "LoggingSettings",
    "get_settings", "clear_settings_cache",
]


def __getattr__(name: str):
    """Lazy imports to avoid circular dependencies."""
    if name in ("AbortError", "FailedAttemptError", "RetryCancelled", "RetryTimeoutError",
                "ErrorKind", "non_error_raised",
                "Result", "Ok", "Err", "AttemptOutcome",
                "NETWORK_ERROR_MESSAGES", "is_network_error"):
        from . import errors
        return getattr(errors, name)

    if name in ("PersevereSettings", "RetrySettings", "LoggingSettings",
                "get_settings", "clear_settings_cache"):
        from . import config
        return getattr(config, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
