"""Domain-specific errors.

Every error carries a ``DomainErrorInfo`` so callers can map failures to a
stable code without parsing messages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class OgsDomainError(Exception):
    """Base class for all domain errors."""


@dataclass(frozen=True)
class DomainErrorInfo:
    code: str
    message: str
    detail: Optional[str] = None


class InvalidURLError(OgsDomainError):
    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.info = DomainErrorInfo(code="INVALID_URL", message=message, detail=detail)


class BlacklistedURLError(OgsDomainError):
    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.info = DomainErrorInfo(code="BLACKLISTED_URL", message=message, detail=detail)


class NonHTMLURLError(OgsDomainError):
    """Raised when the target is (or is served as) something other than an HTML page."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.info = DomainErrorInfo(code="NON_HTML_URL", message=message, detail=detail)


class DownloadLimitExceededError(OgsDomainError):
    """Raised when a response body grows past the configured download limit."""

    def __init__(self, limit: int, detail: str | None = None):
        message = f"Exceeded the download limit of {limit} bytes"
        super().__init__(message)
        self.limit = limit
        self.info = DomainErrorInfo(code="DOWNLOAD_LIMIT_EXCEEDED", message=message, detail=detail)


class HTTPStatusError(OgsDomainError):
    def __init__(self, status: int, message: str | None = None, detail: str | None = None):
        message = message or f"Server has returned a {status} status code"
        super().__init__(message)
        self.status = status
        self.info = DomainErrorInfo(code="HTTP_STATUS", message=message, detail=detail)


class PageNotFoundError(OgsDomainError):
    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.info = DomainErrorInfo(code="PAGE_NOT_FOUND", message=message, detail=detail)


class InvalidInputError(OgsDomainError):
    """Raised when caller-supplied options fail validation."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.info = DomainErrorInfo(code="INVALID_INPUT", message=message, detail=detail)
