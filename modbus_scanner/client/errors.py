"""Error types raised by the scanner API client."""

from typing import Optional


class ScannerApiError(Exception):
    """Base class for every client-side failure."""


class ConnectivityError(ScannerApiError):
    """The server could not be reached (refused, DNS failure, timeout)."""


class ProtocolError(ScannerApiError):
    """The server answered with a non-2xx status or a non-JSON body."""

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        self.status = status
        self.message = message
        text = f"HTTP {status}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class DecodeError(ScannerApiError):
    """The body is not valid JSON or does not have the expected shape."""


class FormError(ScannerApiError):
    """A form field is missing or does not parse."""
