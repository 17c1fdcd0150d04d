"""
Custom exceptions for the ConvertHub SDK.
"""

from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Kind tag shared by every SDK exception."""

    USAGE = "usage"
    API = "api"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


class ConvertHubError(Exception):
    """Base exception for SDK usage and configuration errors."""

    kind = ErrorKind.USAGE

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ApiError(ConvertHubError):
    """Raised when an API call fails, at the HTTP or transport level."""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str = "",
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.details = details

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"status_code={self.status_code!r}, error_code={self.error_code!r})"
        )


class AuthenticationError(ApiError):
    """Raised for 401 and 403 responses."""

    kind = ErrorKind.AUTHENTICATION


class ValidationError(ApiError):
    """Raised when a request is rejected for its shape or content.

    Server-side validation failures carry the HTTP status; local checks
    (missing or unreadable files) leave ``status_code`` as ``None``.
    """

    kind = ErrorKind.VALIDATION

    @property
    def validation_errors(self) -> Optional[Dict[str, Any]]:
        if not isinstance(self.details, dict):
            return None
        return self.details.get("validation_errors")

    @property
    def failed_fields(self) -> Optional[List[str]]:
        if not isinstance(self.details, dict):
            return None
        return self.details.get("failed_fields")

    @property
    def is_local(self) -> bool:
        return self.status_code is None


class JobTimeoutError(ConvertHubError):
    """Raised when a job does not reach a terminal state in time."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, job_id: str, waited: float):
        super().__init__(f"Timeout waiting for job completion (job ID: {job_id})")
        self.job_id = job_id
        self.waited = waited


class WaitCancelledError(ConvertHubError):
    """Raised when a job wait is aborted through its cancel event."""

    kind = ErrorKind.CANCELLED

    def __init__(self, job_id: str):
        super().__init__(f"Wait for job {job_id} was cancelled")
        self.job_id = job_id
