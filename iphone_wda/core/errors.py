"""Exceptions raised by the WDA client."""

from __future__ import annotations


class WDAError(Exception):
    """Base class for every WebDriverAgent client error."""
    pass


class TransportError(WDAError):
    """Raised when the WDA server cannot be reached."""
    pass


class DecodeError(WDAError):
    """Raised when a response does not have the expected shape."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class ServerError(WDAError):
    """Raised when WDA answers with an error embedded in the response."""

    def __init__(
        self,
        message: str,
        error: str | None = None,
        status_code: int | None = None,
        raw: str | None = None,
    ):
        super().__init__(message)
        self.error = error
        self.status_code = status_code
        self.raw = raw


class NoSuchElement(WDAError):
    """Raised when a query matches nothing."""
    pass


class InvalidArgument(WDAError):
    """Raised for arguments rejected before any request is sent."""
    pass
