"""Exceptions raised by the Lightroom client.

Every failure carries a short description of the operation that failed and,
when the service answered, the HTTP status code it answered with.
"""

from __future__ import annotations

from typing import Optional


class LightroomError(Exception):
    """Base class for Lightroom client failures."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message}: error status {self.status_code}"


class MissingTokenError(LightroomError):
    """An authenticated operation was invoked without a user token."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation}: no user token")


class TransportError(LightroomError):
    """The request failed or the service answered with a non-success status."""


class DuplicateContentError(LightroomError):
    """A revision with the same content fingerprint already exists."""

    def __init__(self, message: str = "create revision failed: duplicate found") -> None:
        super().__init__(message, status_code=412)

    def __str__(self) -> str:
        return self.message


class EmptyResultError(LightroomError):
    """A composed workflow found nothing to operate on."""


class InvalidPayloadError(LightroomError):
    """The caller passed data that cannot be sent, such as an empty master."""


class MalformedResponseError(LightroomError):
    """A JSON response could not be parsed once its guard was stripped."""


__all__ = [
    "LightroomError",
    "MissingTokenError",
    "TransportError",
    "DuplicateContentError",
    "EmptyResultError",
    "InvalidPayloadError",
    "MalformedResponseError",
]
