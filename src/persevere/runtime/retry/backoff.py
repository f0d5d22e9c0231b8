"""Backoff strategies for the operation scheduler.

Provides pluggable delay calculation between attempts:
- ExponentialBackoff: min_timeout * factor ** n, capped, optionally randomized
- ConstantBackoff: Fixed delay
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Implementations compute the delay before the next attempt.
    Retry numbers are 0-indexed (first retry = 0).
    """

    def delay(self, retry: int) -> float:
        """Calculate delay in seconds for given retry number.

        Args:
            retry: 0-indexed retry number

        Returns:
            Delay in seconds before the next attempt
        """
        ...


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff with optional randomization.

    Delay = min(r * min_timeout * factor ** retry, max_timeout),
    where r is drawn from [1, 2) when randomize is set, 1 otherwise.

    Attributes:
        min_timeout: Delay before the first retry in seconds (default: 1.0)
        max_timeout: Maximum delay cap in seconds (default: unbounded)
        factor: Exponential growth factor (default: 2.0)
        randomize: Spread delays to avoid synchronized retries (default: False)
    """

    min_timeout: float = 1.0
    max_timeout: float = float("inf")
    factor: float = 2.0
    randomize: bool = False

    def delay(self, retry: int) -> float:
        if not self.min_timeout:
            return 0.0
        try:
            grown = self.factor ** retry
        except OverflowError:
            grown = float("inf")
        r = random.uniform(1.0, 2.0) if self.randomize else 1.0
        return min(r * self.min_timeout * grown, self.max_timeout)


@dataclass(frozen=True, slots=True)
class ConstantBackoff:
    """Fixed delay between attempts.

    Attributes:
        delay_seconds: Fixed delay in seconds (default: 1.0)
    """

    delay_seconds: float = 1.0

    def delay(self, retry: int) -> float:
        return self.delay_seconds
