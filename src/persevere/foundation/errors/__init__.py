"""Error handling for persevere.

- AbortError/FailedAttemptError: exceptions exchanged with callers
- RetryCancelled/RetryTimeoutError: cancellation and scheduler timeouts
- ErrorKind: failure taxonomy
- Result/Ok/Err: attempt outcomes
- is_network_error: default network-failure classifier
"""

from .errors import (
    AbortError,
    ErrorKind,
    FailedAttemptError,
    RetryCancelled,
    RetryTimeoutError,
    non_error_raised,
)
from .network import NETWORK_ERROR_MESSAGES, is_network_error
from .result import AttemptOutcome, Err, Ok, Result

__all__ = [
    # Exceptions
    "AbortError", "FailedAttemptError", "RetryCancelled", "RetryTimeoutError",
    "ErrorKind", "non_error_raised",
    # Network classifier
    "NETWORK_ERROR_MESSAGES", "is_network_error",
    # Outcomes
    "Result", "Ok", "Err", "AttemptOutcome",
]
