"""Domain exception classes for the signal relay.

Raised while decoding inbound WebSocket frames and handled by the
WebSocket endpoint, which logs the problem and keeps the connection open.
"""

from __future__ import annotations


class InvalidEventError(Exception):
    """Raised when an inbound frame cannot be decoded into a known event."""

    def __init__(self, message: str, *, event: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.event = event
