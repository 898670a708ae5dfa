"""Exception hierarchy for Koomy."""

from __future__ import annotations

GENERIC_API_ERROR = "Request failed"


class KoomyError(Exception):
    """Base exception for all Koomy errors."""


class ApiError(KoomyError):
    """Raised when the REST API answers with a non-2xx status."""

    def __init__(self, message: str = GENERIC_API_ERROR, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class UploadError(KoomyError):
    """Raised when one of the upload steps fails."""


class UploadValidationError(UploadError):
    """Raised when a file is rejected before any network call."""


class ConfigError(KoomyError, ValueError):
    """Raised when configuration is invalid."""
