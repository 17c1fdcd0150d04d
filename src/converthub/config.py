"""
Configuration management for the SDK.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.converthub.com"
API_VERSION = "v2"
SDK_VERSION = "1.0.0"
USER_AGENT = f"converthub-python-sdk/{SDK_VERSION}"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ClientConfig(BaseSettings):
    """Transport configuration for a ConvertHub client.

    Values can be passed directly or read from ``CONVERTHUB_*`` environment
    variables. Instances are frozen once built.

    Attributes:
        api_key: Credential used by ``ConvertHubClient.from_env``
        base_url: API root, without the version segment
        timeout: Total request timeout in seconds
        connect_timeout: Connection timeout in seconds
        retry_enabled: Retry transient failures (network errors, 5xx, 429)
        max_retries: Retries after the first attempt
        retry_backoff: Seconds added per retry; retry n waits ``n * retry_backoff``
        http_options: Extra keyword arguments for ``httpx.Client``
        debug: Attach a stream handler to the ``converthub`` logger
        log_level: Level used when ``debug`` is set

    Example:
        >>> config = ClientConfig(timeout=60, max_retries=5)
        >>> client = ConvertHubClient("your-key", config)
    """

    model_config = SettingsConfigDict(env_prefix="CONVERTHUB_", frozen=True)

    api_key: Optional[str] = Field(default=None, repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=30.0, gt=0)
    connect_timeout: float = Field(default=10.0, gt=0)
    retry_enabled: bool = True
    max_retries: int = Field(default=3, ge=0)
    retry_backoff: float = Field(default=1.0, ge=0)
    http_options: Dict[str, Any] = Field(default_factory=dict)
    debug: bool = False
    log_level: str = "INFO"

    @property
    def api_base_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{API_VERSION}/"

    @property
    def effective_max_retries(self) -> int:
        return self.max_retries if self.retry_enabled else 0


def get_config() -> ClientConfig:
    return ClientConfig()


def setup_logging(config: ClientConfig) -> None:
    """Configure logging for the SDK."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logger = logging.getLogger("converthub")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name."""
    return logging.getLogger(f"converthub.{name}")
