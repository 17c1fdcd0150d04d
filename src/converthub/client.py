"""
Main client for the ConvertHub API v2.
"""

from typing import Any, Dict, Optional

import httpx

from .config import ClientConfig, get_config, get_logger, setup_logging
from .resources import (
    ChunkedUploadResource,
    ConversionsResource,
    FormatsResource,
    JobsResource,
)
from .transport import Transport


class ConvertHubClient:
    """
    Client for the ConvertHub file conversion API.

    Groups the API into resources: ``conversions``, ``jobs``, ``formats``
    and ``chunked_upload``. All calls are synchronous.

    Examples:
        Basic usage:
        >>> client = ConvertHubClient("your-api-key")
        >>> job = client.conversions.convert("document.pdf", "docx")
        >>> job = client.jobs.wait_for_completion(job.job_id)
        >>> client.jobs.get_download_url(job.job_id).download_to("document.docx")

        With configuration:
        >>> client = ConvertHubClient(
        ...     "your-api-key",
        ...     ClientConfig(timeout=60, max_retries=5),
        ... )
    """

    def __init__(
        self,
        api_key: str,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: ConvertHub API key, sent as a bearer token
            config: Transport configuration (defaults, overridable through
                ``CONVERTHUB_*`` environment variables)
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``
                in tests

        Raises:
            ConvertHubError: If the API key is empty
        """
        self.config = config or get_config()
        if self.config.debug:
            setup_logging(self.config)
        self.logger = get_logger("client")

        self._transport = Transport(api_key, self.config, transport)

        self._conversions = ConversionsResource(self._transport)
        self._jobs = JobsResource(self._transport)
        self._formats = FormatsResource(self._transport)
        self._chunked_upload = ChunkedUploadResource(self._transport)

        self.logger.debug("ConvertHubClient initialized for %s", self.config.api_base_url)

    @classmethod
    def from_env(
        cls, config: Optional[ClientConfig] = None, **kwargs: Any
    ) -> "ConvertHubClient":
        """Create a client whose API key comes from ``config.api_key`` (``CONVERTHUB_API_KEY``)."""
        config = config or get_config()
        return cls(config.api_key or "", config, **kwargs)

    def __enter__(self) -> "ConvertHubClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    @property
    def conversions(self) -> ConversionsResource:
        return self._conversions

    @property
    def jobs(self) -> JobsResource:
        return self._jobs

    @property
    def formats(self) -> FormatsResource:
        return self._formats

    @property
    def chunked_upload(self) -> ChunkedUploadResource:
        return self._chunked_upload

    @property
    def http_client(self) -> httpx.Client:
        return self._transport.http_client

    def request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """Send a raw API request; see ``Transport.execute``."""
        return self._transport.execute(method, path, **kwargs)

    def get_account(self) -> Dict[str, Any]:
        """Get account details: membership, credits and file size limits."""
        return self.request("GET", "account")

    def health(self) -> Dict[str, Any]:
        return self.request("GET", "health")
