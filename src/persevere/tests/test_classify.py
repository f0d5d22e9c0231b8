"""Tests for failure classification and the network-error classifier."""

from __future__ import annotations

import pytest

from persevere import AbortError, ErrorKind, FailureKind, classify_failure, is_network_error
from persevere.foundation.errors import NETWORK_ERROR_MESSAGES


class NonError(BaseException):
    pass


class CustomTypeError(TypeError):
    pass


# ═════════════════════════════════════════════════════════════════════════════
# is_network_error
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("message", sorted(NETWORK_ERROR_MESSAGES))
def test_known_messages_are_network_errors(message: str) -> None:
    assert is_network_error(TypeError(message))


@pytest.mark.parametrize(
    "error",
    [
        TypeError("'NoneType' object is not subscriptable"),
        TypeError(),
        TypeError("failed to fetch"),  # case sensitive
        ValueError("Failed to fetch"),
    ],
)
def test_other_errors_are_not_network_errors(error: BaseException) -> None:
    assert not is_network_error(error)


# ═════════════════════════════════════════════════════════════════════════════
# classify_failure
# ═════════════════════════════════════════════════════════════════════════════


def test_transient_exception() -> None:
    error = ConnectionResetError("reset by peer")
    result = classify_failure(error, is_network_error)

    assert result.kind is FailureKind.TRANSIENT
    assert result.retryable
    assert result.error is error


def test_network_type_error_is_retryable() -> None:
    error = TypeError("fetch failed")
    result = classify_failure(error, is_network_error)

    assert result.kind is FailureKind.NETWORK
    assert result.retryable
    assert result.kind.error_kind is ErrorKind.NETWORK_TYPE_ERROR


def test_other_type_error_is_fatal() -> None:
    error = TypeError("unsupported operand")
    result = classify_failure(error, is_network_error)

    assert result.kind is FailureKind.PROGRAMMER_ERROR
    assert not result.retryable
    assert result.error is error


def test_type_error_subclass_with_network_message_is_retryable() -> None:
    error = CustomTypeError("Failed to fetch")

    assert is_network_error(error)
    result = classify_failure(error, is_network_error)
    assert result.kind is FailureKind.NETWORK
    assert result.error is error


def test_type_error_subclass_is_programmer_error() -> None:
    result = classify_failure(CustomTypeError("bad argument"), is_network_error)
    assert result.kind is FailureKind.PROGRAMMER_ERROR


def test_custom_classifier_consulted_for_type_errors_only() -> None:
    calls: list[BaseException] = []

    def classifier(error: BaseException) -> bool:
        calls.append(error)
        return True

    assert classify_failure(TypeError("anything"), classifier).kind is FailureKind.NETWORK
    assert classify_failure(ValueError("other"), classifier).kind is FailureKind.TRANSIENT
    assert len(calls) == 1


def test_abort_error_unwraps_original() -> None:
    original = KeyError("gone")
    result = classify_failure(AbortError(original), is_network_error)

    assert result.kind is FailureKind.ABORTED
    assert not result.retryable
    assert result.error is original
    assert result.kind.error_kind is ErrorKind.ABORT_REQUESTED


def test_abort_error_from_message() -> None:
    result = classify_failure(AbortError("stop"), is_network_error)

    assert result.kind is FailureKind.ABORTED
    assert type(result.error) is Exception
    assert str(result.error) == "stop"


def test_non_error_becomes_type_error() -> None:
    result = classify_failure(NonError("foo"), is_network_error)

    assert result.kind is FailureKind.NON_ERROR
    assert not result.retryable
    assert isinstance(result.error, TypeError)
    assert str(result.error) == 'Non-error was thrown: "foo". You should only throw errors.'


def test_every_kind_maps_to_error_kind() -> None:
    assert {kind.error_kind for kind in FailureKind} <= set(ErrorKind)
    assert {kind for kind in FailureKind if kind.retryable} == {FailureKind.NETWORK, FailureKind.TRANSIENT}
