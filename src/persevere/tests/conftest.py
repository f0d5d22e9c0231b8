"""Shared fixtures: fast, isolated settings for every test."""

from __future__ import annotations

import pytest

from persevere.foundation.config import clear_settings_cache


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    """Zero scheduler delays and reload settings around each test."""
    monkeypatch.setenv("PERSEVERE_RETRY_MIN_TIMEOUT", "0")
    clear_settings_cache()
    yield
    clear_settings_cache()
