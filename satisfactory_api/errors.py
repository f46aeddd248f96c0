"""Client error types for dedicated server API interactions."""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Caller-visible classification of a failed call."""

    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    HTTP = "http"
    DECODE = "decode"
    CANCELLED = "cancelled"
    DISPOSED = "disposed"
    UNEXPECTED = "unexpected"


class SatisfactoryClientError(Exception):
    """Base error for dedicated server API client failures."""

    kind: ErrorKind = ErrorKind.UNEXPECTED
    retryable: bool = False


class SatisfactoryTimeout(SatisfactoryClientError):
    """Timeout while communicating with the server."""

    kind = ErrorKind.TIMEOUT
    retryable = True


class SatisfactoryConnectionError(SatisfactoryClientError):
    """Network connection to the server failed."""

    kind = ErrorKind.TRANSPORT
    retryable = True


class SatisfactoryResponseError(SatisfactoryClientError):
    """Non-2xx HTTP response from the server."""

    kind = ErrorKind.HTTP

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"HTTP {status}: {body}")
        self.status = status
        self.body = body


class SatisfactoryDecodeError(SatisfactoryClientError):
    """Response body did not match the expected shape."""

    kind = ErrorKind.DECODE


class SatisfactoryDisposedError(SatisfactoryClientError):
    """The client was closed before the call was made."""

    kind = ErrorKind.DISPOSED


class ConfigurationError(ValueError):
    """Invalid client settings."""
