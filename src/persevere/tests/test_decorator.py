"""Tests for the retrying decorator."""

from __future__ import annotations

import pytest

from persevere import FailedAttemptError, RetryOptions, retrying


@pytest.mark.asyncio
async def test_retries_decorated_coroutine() -> None:
    calls: list[str] = []

    @retrying(retries=3)
    async def fetch(key: str) -> str:
        calls.append(key)
        if len(calls) < 3:
            raise ConnectionError("flaky")
        return key.upper()

    assert await fetch("abc") == "ABC"
    assert calls == ["abc", "abc", "abc"]
    assert fetch.__name__ == "fetch"


@pytest.mark.asyncio
async def test_passes_attempt_number_when_accepted() -> None:
    seen: list[int] = []

    @retrying({"retries": 5})
    def compute(value: int, *, attempt_number: int = 0) -> int:
        seen.append(attempt_number)
        if attempt_number < 2:
            raise RuntimeError("not yet")
        return value * attempt_number

    assert await compute(21) == 42
    assert seen == [1, 2]


@pytest.mark.asyncio
async def test_options_object_and_overrides() -> None:
    calls = 0

    @retrying(RetryOptions(retries=10), retries=1)
    async def always_fails() -> None:
        nonlocal calls
        calls += 1
        raise ValueError("nope")

    with pytest.raises(FailedAttemptError) as exc_info:
        await always_fails()

    assert calls == 2
    assert exc_info.value.attempt_number == 2


@pytest.mark.asyncio
async def test_each_call_is_a_fresh_session() -> None:
    attempts: list[int] = []

    @retrying(retries=1)
    async def flaky(*, attempt_number: int) -> int:
        attempts.append(attempt_number)
        if attempt_number == 1:
            raise ConnectionError("first")
        return attempt_number

    assert await flaky() == 2
    assert await flaky() == 2
    assert attempts == [1, 2, 1, 2]
