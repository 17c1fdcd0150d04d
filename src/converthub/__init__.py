"""
ConvertHub SDK

Python client for the ConvertHub file conversion API.
"""

from .client import ConvertHubClient
from .config import SDK_VERSION, ClientConfig
from .models import (
    ConversionJob,
    ConversionOptions,
    DownloadInfo,
    JobStatus,
    UploadSession,
)
from .exceptions import (
    ApiError,
    AuthenticationError,
    ConvertHubError,
    ErrorKind,
    JobTimeoutError,
    ValidationError,
    WaitCancelledError,
)

__version__ = SDK_VERSION

__all__ = [
    "ConvertHubClient",
    "ClientConfig",
    "ConversionJob",
    "ConversionOptions",
    "DownloadInfo",
    "JobStatus",
    "UploadSession",
    "ApiError",
    "AuthenticationError",
    "ConvertHubError",
    "ErrorKind",
    "JobTimeoutError",
    "ValidationError",
    "WaitCancelledError",
]
