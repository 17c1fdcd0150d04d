"""
HTTP transport for the ConvertHub API.

Wraps an ``httpx.Client`` with bearer authentication, the retry policy,
JSON decoding and status-code based error classification.
"""

import time
from typing import Any, Dict, Generator, Optional

import httpx

from .config import ClientConfig, get_logger
from .core.remote import parse_http_error_response
from .core.utils import (
    build_auth_header,
    build_default_headers,
    calculate_retry_delay,
    classify_request_exception,
    should_retry_request,
)
from .exceptions import ApiError, ConvertHubError

logger = get_logger("transport")


class BearerAuth(httpx.Auth):
    """Sets ``Authorization: Bearer <key>`` on every request, replacing any caller value."""

    def __init__(self, api_key: str):
        self._headers = build_auth_header(api_key)

    def auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers.update(self._headers)
        yield request


class Transport:
    """Executes API calls and turns their results into JSON or SDK errors."""

    def __init__(
        self,
        api_key: str,
        config: ClientConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ConvertHubError("API key is required")

        self.config = config
        self._client = httpx.Client(
            **self._build_client_options(config),
            base_url=config.api_base_url,
            auth=BearerAuth(api_key),
            transport=transport,
        )

    @staticmethod
    def _build_client_options(config: ClientConfig) -> Dict[str, Any]:
        """Merge caller ``http_options`` over the default client options."""
        extra = dict(config.http_options)
        headers = build_default_headers()
        headers.update(extra.pop("headers", None) or {})

        # Reserved: always derived from the config and constructor arguments.
        for key in ("base_url", "auth", "transport"):
            extra.pop(key, None)

        options: Dict[str, Any] = {
            "timeout": httpx.Timeout(config.timeout, connect=config.connect_timeout),
        }
        options.update(extra)
        options["headers"] = headers
        return options

    @property
    def http_client(self) -> httpx.Client:
        return self._client

    def close(self) -> None:
        self._client.close()

    def execute(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """
        Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to ``{base_url}/v2/``
            **kwargs: Passed to ``httpx.Client.request`` (json, data, files, params)

        Returns:
            The decoded JSON object for status codes below 400

        Raises:
            AuthenticationError: For 401 and 403 responses
            ValidationError: For 400/422 responses with code VALIDATION_ERROR
            ApiError: For every other failure, including transport errors
                and malformed JSON
        """
        response = self._send_with_retries(method, path, **kwargs)
        return self._handle_response(response)

    def _send_with_retries(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        max_retries = self.config.effective_max_retries
        retries = 0

        while True:
            response: Optional[httpx.Response] = None
            error: Optional[httpx.HTTPError] = None

            logger.debug("%s %s (attempt %d)", method, path, retries + 1)
            try:
                response = self._client.request(method, path, **kwargs)
            except httpx.HTTPError as e:
                error = e

            if not should_retry_request(retries, max_retries, response, error):
                break

            retries += 1
            delay = calculate_retry_delay(retries, self.config.retry_backoff)
            if error is not None:
                reason = classify_request_exception(error)
            else:
                reason = f"HTTP {response.status_code}"
            logger.warning(
                "%s %s failed (%s), retry %d/%d in %.1fs",
                method,
                path,
                reason,
                retries,
                max_retries,
                delay,
            )
            time.sleep(delay)

        if error is not None:
            raise ApiError(f"Request failed: {error}") from error

        return response

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        status_code = response.status_code

        try:
            data = response.json()
        except ValueError as e:
            raise ApiError(
                f"Invalid JSON response: {e}", status_code=status_code
            ) from e

        if status_code >= 400:
            error = parse_http_error_response(data, status_code)
            logger.debug(
                "API error %s (%s): %s", status_code, error.error_code, error.message
            )
            raise error

        if not isinstance(data, dict):
            raise ApiError(
                "Invalid JSON response: expected an object", status_code=status_code
            )

        return data
