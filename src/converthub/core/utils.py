"""
Utility functions for the retry policy and request headers.
"""

from typing import Dict, Optional

import httpx

from ..config import USER_AGENT

RETRYABLE_STATUS = 429


def build_default_headers() -> Dict[str, str]:
    """Build the headers sent with every API request, minus credentials."""
    return {"User-Agent": USER_AGENT, "Accept": "application/json"}


def build_auth_header(api_key: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code == RETRYABLE_STATUS


def should_retry_request(
    retries: int,
    max_retries: int,
    response: Optional[httpx.Response] = None,
    exception: Optional[Exception] = None,
) -> bool:
    """Decide whether a finished attempt should be retried.

    ``retries`` counts the retries already performed for this call.
    """
    if retries >= max_retries:
        return False

    if exception is not None:
        return isinstance(exception, httpx.TransportError)

    if response is not None:
        return is_retryable_status(response.status_code)

    return False


def calculate_retry_delay(retry_number: int, backoff: float) -> float:
    """Linear backoff: retry n (1-indexed) waits ``n * backoff`` seconds."""
    return backoff * retry_number


def classify_request_exception(exception: Exception) -> str:
    """Classify a transport exception for log messages."""
    if isinstance(exception, httpx.TimeoutException):
        return "timeout"
    elif isinstance(exception, httpx.NetworkError):
        return "network"
    elif isinstance(exception, httpx.ProtocolError):
        return "protocol"
    else:
        return "unknown"
