"""Decorator form of ``retry``.

Example:
    >>> @retrying(retries=3, min_timeout=0.5)
    ... async def fetch_profile(user_id: str, *, attempt_number: int = 1) -> dict:
    ...     resp = await client.get(f"/users/{user_id}", headers={"X-Attempt": str(attempt_number)})
    ...     resp.raise_for_status()
    ...     return resp.json()
    >>>
    >>> profile = await fetch_profile("42")
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from functools import wraps
from typing import TYPE_CHECKING, Any, Awaitable, Callable, ParamSpec, TypeVar

from .engine import retry

if TYPE_CHECKING:
    from .options import RetryOptions

P = ParamSpec("P")
T = TypeVar("T")

ATTEMPT_KEYWORD = "attempt_number"


def retrying(
    options: RetryOptions | Mapping[str, Any] | None = None,
    /,
    **overrides: Any,
) -> Callable[[Callable[P, Awaitable[T] | T]], Callable[P, Awaitable[T]]]:
    """Wrap a function so each call runs under ``retry``.

    If the function accepts an ``attempt_number`` keyword, the current
    attempt number is passed through it. Options are merged on every call,
    so environment settings are read per session.
    """
    def decorator(fn: Callable[P, Awaitable[T] | T]) -> Callable[P, Awaitable[T]]:
        wants_attempt = ATTEMPT_KEYWORD in inspect.signature(fn).parameters

        @wraps(fn)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            def operation(attempt_number: int) -> Awaitable[T] | T:
                if wants_attempt:
                    return fn(*args, **{**kwargs, ATTEMPT_KEYWORD: attempt_number})
                return fn(*args, **kwargs)

            return await retry(operation, options, **overrides)

        return wrapper

    return decorator
