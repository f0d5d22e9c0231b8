"""Cancellation primitives for retry sessions.

Key Components:
    - AbortController: caller-side handle that triggers cancellation
    - AbortSignal: observable abort state passed to ``retry``
"""

from __future__ import annotations

from .signal import AbortController, AbortListener, AbortSignal

__all__ = [
    "AbortController",
    "AbortListener",
    "AbortSignal",
]
