"""Caller-held cancellation handle for retry sessions.

An AbortController owns an AbortSignal. Passing the signal to ``retry``
lets the caller stop the session from outside, whichever suspension point
it is waiting on.

Example:
    >>> controller = AbortController()
    >>> cancel_button.on_click(lambda: controller.abort(RuntimeError("User clicked cancel")))
    >>> try:
    ...     await retry(run, signal=controller.signal)
    ... except RuntimeError as e:
    ...     print(e)
    User clicked cancel
"""

from __future__ import annotations

import logging
from typing import Callable

from persevere.foundation.errors import RetryCancelled

logger = logging.getLogger("persevere.signal")

AbortListener = Callable[[BaseException], None]


class AbortSignal:
    """Observable abort state.

    Listeners fire once, synchronously, from ``AbortController.abort``.
    Not thread-safe: abort from the event loop thread (use
    ``loop.call_soon_threadsafe`` from other threads).
    """

    __slots__ = ("_aborted", "_reason", "_listeners")

    def __init__(self) -> None:
        self._aborted = False
        self._reason: BaseException | None = None
        self._listeners: list[AbortListener] = []

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> BaseException | None:
        """Reason passed to abort(), None until aborted."""
        return self._reason

    def add_listener(self, listener: AbortListener) -> None:
        """Register listener; ignored if the signal already fired."""
        if not self._aborted and listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: AbortListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass  # Already fired or never registered

    def throw_if_aborted(self) -> None:
        if self._aborted and self._reason is not None:
            raise self._reason

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _fire(self, reason: BaseException) -> None:
        self._aborted, self._reason = True, reason
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(reason)

    @classmethod
    def aborted_with(cls, reason: BaseException | None = None) -> AbortSignal:
        """Create a signal that is already aborted."""
        signal = cls()
        signal._fire(reason if reason is not None else RetryCancelled())
        return signal

    def __repr__(self) -> str:
        return f"AbortSignal(aborted={self._aborted}, reason={self._reason!r})"


class AbortController:
    """Owner of an AbortSignal."""

    __slots__ = ("_signal",)

    def __init__(self) -> None:
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: BaseException | None = None) -> None:
        """Abort the signal. Later calls are no-ops.

        Args:
            reason: Exception sessions reject with (default: RetryCancelled)
        """
        if self._signal.aborted:
            return
        reason = reason if reason is not None else RetryCancelled()
        logger.debug(f"Signal aborted: {reason!r}")
        self._signal._fire(reason)
