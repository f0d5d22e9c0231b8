"""Recognise network failures that surface as TypeError.

Several HTTP clients report a dropped connection as a bare TypeError with a
fixed message. Those are transient and worth retrying; every other TypeError
is treated as a programming mistake.
"""

from __future__ import annotations

NETWORK_ERROR_MESSAGES: frozenset[str] = frozenset({
    "Failed to fetch",  # Chrome
    "NetworkError when attempting to fetch resource.",  # Firefox
    "The Internet connection appears to be offline.",  # Safari 16
    # Generic wording. Browsers only mean a network failure when the error has
    # no stack; Python exceptions offer no such marker, so it is always accepted
    "Load failed",  # Safari 17+
    "Network request failed",  # cross-fetch
    "fetch failed",  # undici
})


def is_network_error(error: BaseException) -> bool:
    """Whether ``error`` is a TypeError (or subclass) carrying a known network-failure message."""
    if not isinstance(error, TypeError) or not error.args:
        return False
    message = error.args[0]
    return isinstance(message, str) and message in NETWORK_ERROR_MESSAGES
