"""Failure classification for attempt errors.

Decides, for each error raised by an attempt, whether the session must stop
immediately or may consult the retry policy. First match wins:

    non-Exception raise       -> NON_ERROR (wrapped in a TypeError)
    AbortError                -> ABORTED (unwrapped to its original error)
    TypeError, not network    -> PROGRAMMER_ERROR
    TypeError, network        -> NETWORK
    any other Exception       -> TRANSIENT
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable

from persevere.foundation.errors import AbortError, ErrorKind, non_error_raised


class FailureKind(StrEnum):
    """Outcome of classifying one attempt error."""
    NON_ERROR = "NON_ERROR"
    ABORTED = "ABORTED"
    PROGRAMMER_ERROR = "PROGRAMMER_ERROR"
    NETWORK = "NETWORK"
    TRANSIENT = "TRANSIENT"

    @property
    def retryable(self) -> bool:
        return self in _RETRYABLE_KINDS

    @property
    def error_kind(self) -> ErrorKind:
        """Matching entry of the public failure taxonomy."""
        return _ERROR_KINDS[self]


_RETRYABLE_KINDS: frozenset[FailureKind] = frozenset({FailureKind.NETWORK, FailureKind.TRANSIENT})

_ERROR_KINDS: dict[FailureKind, ErrorKind] = {
    FailureKind.NON_ERROR: ErrorKind.NON_ERROR,
    FailureKind.ABORTED: ErrorKind.ABORT_REQUESTED,
    FailureKind.PROGRAMMER_ERROR: ErrorKind.PROGRAMMER_ERROR,
    FailureKind.NETWORK: ErrorKind.NETWORK_TYPE_ERROR,
    FailureKind.TRANSIENT: ErrorKind.TRANSIENT,
}


@dataclass(frozen=True, slots=True)
class Classification:
    """Classified attempt error.

    ``error`` is what the session reports: the raised exception itself, the
    unwrapped original of an AbortError, or the TypeError built for a
    non-error raise.
    """
    kind: FailureKind
    error: BaseException

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


def classify_failure(
    raised: BaseException,
    is_network_error: Callable[[BaseException], bool],
) -> Classification:
    """Classify an error raised by an attempt.

    Args:
        raised: What the operation raised
        is_network_error: Consulted only for TypeErrors

    Returns:
        Classification with the kind and the error to report
    """
    match raised:
        case AbortError(original_error=original):
            return Classification(FailureKind.ABORTED, original)
        case TypeError() if is_network_error(raised):
            return Classification(FailureKind.NETWORK, raised)
        case TypeError():
            return Classification(FailureKind.PROGRAMMER_ERROR, raised)
        case Exception():
            return Classification(FailureKind.TRANSIENT, raised)
        case _:
            return Classification(FailureKind.NON_ERROR, non_error_raised(raised))
