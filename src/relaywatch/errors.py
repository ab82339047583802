"""Exceptions raised by the broadcast layer."""

from __future__ import annotations


class RelayError(Exception):
    """Base class for broadcast state errors."""


class NotInitialized(RelayError):
    """Raised when the round snapshot is read before the first load settled."""

    def __init__(self, message: str = "Broadcast round is not ready") -> None:
        super().__init__(message)


class MalformedEvent(RelayError, ValueError):
    """Raised when a socket payload is missing or has invalid required fields."""

    def __init__(self, topic: str, reason: str) -> None:
        super().__init__(f"Malformed {topic!r} event: {reason}")
        self.topic = topic
        self.reason = reason
