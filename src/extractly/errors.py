"""Custom exception classes for the Extractly SDK."""

from __future__ import annotations

from typing import Any


class ExtractlyError(Exception):
    """Base exception for all Extractly errors."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class APIError(ExtractlyError):
    """Raised when the API returns an HTTP error (4xx/5xx)."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response: Any = None,
        code: str | None = None,
        details: Any = None,
    ):
        super().__init__(message, code)
        self.status_code = status_code
        self.response = response
        self.details = details


class ValidationError(ExtractlyError):
    """Raised for client-side validation errors."""

    pass


class ConfigurationError(ExtractlyError):
    """Raised when page options hold an unknown operation."""

    pass
