"""Tests for AbortController / AbortSignal."""

from __future__ import annotations

import pytest

from persevere import AbortController, AbortSignal, RetryCancelled


def test_abort_fires_listeners_once() -> None:
    controller = AbortController()
    seen: list[BaseException] = []
    reason = RuntimeError("stop")

    controller.signal.add_listener(seen.append)
    controller.abort(reason)
    controller.abort(RuntimeError("ignored"))

    assert seen == [reason]
    assert controller.signal.aborted
    assert controller.signal.reason is reason
    assert controller.signal.listener_count == 0


def test_default_reason() -> None:
    controller = AbortController()
    controller.abort()

    assert isinstance(controller.signal.reason, RetryCancelled)


def test_listener_added_after_abort_is_ignored() -> None:
    controller = AbortController()
    controller.abort()
    seen: list[BaseException] = []

    controller.signal.add_listener(seen.append)

    assert seen == []
    assert controller.signal.listener_count == 0


def test_remove_listener() -> None:
    signal = AbortController().signal
    seen: list[BaseException] = []

    signal.add_listener(seen.append)
    signal.add_listener(seen.append)  # deduplicated
    assert signal.listener_count == 1

    signal.remove_listener(seen.append)
    signal.remove_listener(seen.append)  # unknown listeners are ignored
    assert signal.listener_count == 0


def test_throw_if_aborted() -> None:
    controller = AbortController()
    controller.signal.throw_if_aborted()

    reason = ValueError("cancelled")
    controller.abort(reason)

    with pytest.raises(ValueError) as exc_info:
        controller.signal.throw_if_aborted()
    assert exc_info.value is reason


def test_aborted_with() -> None:
    signal = AbortSignal.aborted_with()

    assert signal.aborted
    assert isinstance(signal.reason, RetryCancelled)
    assert "aborted=True" in repr(signal)
