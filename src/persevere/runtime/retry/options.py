"""Per-session retry configuration.

RetryOptions is immutable. ``merge_options`` builds one per session by
layering, in order: environment-backed defaults (RetrySettings), an optional
base RetryOptions or mapping, and keyword overrides.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Awaitable, Callable

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
    PositiveFloat,
    ValidationInfo,
    field_validator,
    model_validator,
)

from persevere.foundation.config import get_settings
from persevere.foundation.errors import FailedAttemptError, is_network_error
from persevere.runtime.concurrency import AbortSignal

from .backoff import Backoff

OnFailedAttempt = Callable[[FailedAttemptError], Awaitable[None] | None]
ShouldRetry = Callable[[FailedAttemptError], Awaitable[bool] | bool]
NetworkErrorClassifier = Callable[[BaseException], bool]

# Option names whose defaults come from RetrySettings
_SETTINGS_FIELDS: tuple[str, ...] = (
    "retries", "factor", "min_timeout", "max_timeout", "randomize", "forever", "max_retry_time",
)


def _ignore_failure(error: FailedAttemptError) -> None:
    return None


def _always_retry(error: FailedAttemptError) -> bool:
    return True


_CALLBACK_DEFAULTS: dict[str, Callable[..., Any]] = {
    "on_failed_attempt": _ignore_failure,
    "should_retry": _always_retry,
    "is_network_error": is_network_error,
}


class RetryOptions(BaseModel):
    """Configuration for one retry session.

    Attributes:
        retries: Retry budget after the first attempt
        on_failed_attempt: Observer called for each retryable failure; may
            await to add a delay, or raise to stop retrying
        should_retry: Predicate; returning False rejects with the original error
        signal: Cancellation handle; aborting rejects with its reason
        is_network_error: Decides which TypeErrors are transient
        factor, min_timeout, max_timeout, randomize, forever, max_retry_time,
        backoff: Passed through to the scheduler
        scheduler_factory: Builds the scheduler for a session (default: RetryOperation)

    Example:
        >>> opts = RetryOptions(retries=3, min_timeout=0.2, should_retry=lambda e: e.attempt_number < 3)
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,  # AbortSignal, Backoff protocol
        validate_default=True,
        extra="forbid",
        revalidate_instances="never",
    )

    retries: NonNegativeInt = 10
    on_failed_attempt: OnFailedAttempt = Field(default=_ignore_failure, exclude=True, repr=False)
    should_retry: ShouldRetry = Field(default=_always_retry, exclude=True, repr=False)
    signal: AbortSignal | None = Field(default=None, exclude=True)
    is_network_error: NetworkErrorClassifier = Field(default=is_network_error, exclude=True, repr=False)

    # Scheduler pass-through
    factor: PositiveFloat = 2.0
    min_timeout: NonNegativeFloat = 1.0
    max_timeout: PositiveFloat = float("inf")
    randomize: bool = False
    forever: bool = False
    max_retry_time: PositiveFloat | None = None
    backoff: Backoff | None = Field(default=None, repr=False)
    scheduler_factory: Callable[..., Any] | None = Field(default=None, exclude=True, repr=False)

    @field_validator("on_failed_attempt", "should_retry", "is_network_error", mode="before")
    @classmethod
    def _default_callbacks(cls, v: Callable[..., Any] | None, info: ValidationInfo) -> Callable[..., Any]:
        """Treat an explicit None as 'use the default'."""
        return _CALLBACK_DEFAULTS[info.field_name] if v is None else v

    @model_validator(mode="after")
    def _check_timeouts(self) -> RetryOptions:
        if self.min_timeout > self.max_timeout:
            raise ValueError("min_timeout must not exceed max_timeout")
        return self

    def retries_left(self, attempt_number: int) -> int:
        """Retries remaining after ``attempt_number`` failed (the first attempt is not a retry)."""
        return self.retries - (attempt_number - 1)


def merge_options(
    options: RetryOptions | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> RetryOptions:
    """Merge defaults, ``options`` and ``overrides`` into a new RetryOptions.

    Only fields explicitly set on ``options`` override the configured
    defaults, so environment settings still apply to everything else.

    Example:
        >>> base = RetryOptions(retries=3)
        >>> merge_options(base, min_timeout=0).retries
        3
    """
    defaults = get_settings().retry
    merged: dict[str, Any] = {name: getattr(defaults, name) for name in _SETTINGS_FIELDS}
    if isinstance(options, RetryOptions):
        merged.update({name: getattr(options, name) for name in options.model_fields_set})
    elif options is not None:
        merged.update(options)
    merged.update(overrides)
    return RetryOptions(**merged)
