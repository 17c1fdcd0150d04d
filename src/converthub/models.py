"""
Data models for API results and conversion options.
"""

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import httpx

from .config import get_logger
from .core.validation import format_file_size, parse_timestamp, validate_quality
from .exceptions import ConvertHubError

logger = get_logger("models")

DOWNLOAD_TIMEOUT = 300.0
DOWNLOAD_CHUNK_SIZE = 64 * 1024


class JobStatus(str, Enum):
    """Lifecycle states of a conversion job."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "JobStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass(frozen=True)
class JobResult:
    download_url: Optional[str] = None
    file_size: Optional[int] = None
    expires_at: Optional[str] = None


@dataclass(frozen=True)
class JobError:
    code: Optional[str] = None
    message: Optional[str] = None


@dataclass(frozen=True)
class ConversionJob:
    """
    Snapshot of a server-side conversion job.

    Built from a single decoded response; it never refreshes itself. Fetch
    the job again through ``client.jobs.get_status`` for a newer state.

    Attributes:
        job_id: Opaque job identifier
        status: Current JobStatus
        source_format: Format of the uploaded file
        target_format: Requested output format
        result: Download details once the job has completed
        error: Failure code and message when the job has failed
        metadata: Caller metadata echoed back by the API
        processing_time: Processing time as reported by the API
        links: Related API links
        success: The ``success`` flag of the response
        raw: The decoded response body

    Example:
        >>> job = client.conversions.convert("report.pdf", "docx")
        >>> job = client.jobs.wait_for_completion(job.job_id)
        >>> if job.is_completed:
        ...     print(job.download_url)
    """

    job_id: Optional[str]
    status: JobStatus
    source_format: Optional[str] = None
    target_format: Optional[str] = None
    result: Optional[JobResult] = None
    error: Optional[JobError] = None
    metadata: Optional[Dict[str, Any]] = None
    processing_time: Optional[str] = None
    links: Optional[Dict[str, Any]] = None
    success: bool = False
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "ConversionJob":
        result_data = data.get("result")
        error_data = data.get("error")

        result = None
        if isinstance(result_data, dict):
            result = JobResult(
                download_url=result_data.get("download_url"),
                file_size=result_data.get("file_size"),
                expires_at=result_data.get("expires_at"),
            )

        error = None
        if isinstance(error_data, dict):
            error = JobError(
                code=error_data.get("code"), message=error_data.get("message")
            )

        return cls(
            job_id=data.get("job_id"),
            status=JobStatus.parse(data.get("status")),
            source_format=data.get("source_format"),
            target_format=data.get("target_format"),
            result=result,
            error=error,
            metadata=data.get("metadata"),
            processing_time=data.get("processing_time"),
            links=data.get("links"),
            success=bool(data.get("success", False)),
            raw=copy.deepcopy(data),
        )

    @property
    def is_completed(self) -> bool:
        return self.status is JobStatus.COMPLETED

    @property
    def is_failed(self) -> bool:
        return self.status is JobStatus.FAILED

    @property
    def is_processing(self) -> bool:
        return self.status in (JobStatus.QUEUED, JobStatus.PROCESSING)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def download_url(self) -> Optional[str]:
        return self.result.download_url if self.result else None

    @property
    def file_size(self) -> Optional[int]:
        return self.result.file_size if self.result else None

    @property
    def expires_at(self) -> Optional[str]:
        return self.result.expires_at if self.result else None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error else None

    @property
    def error_message(self) -> Optional[str]:
        return self.error.message if self.error else None

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.raw)


@dataclass(frozen=True)
class UploadSession:
    """A chunked upload session opened with ``upload/init``."""

    session_id: Optional[str]
    expires_at: Optional[str] = None
    links: Dict[str, str] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "UploadSession":
        return cls(
            session_id=data.get("session_id"),
            expires_at=data.get("expires_at"),
            links=dict(data.get("links") or {}),
            raw=copy.deepcopy(data),
        )

    @property
    def upload_chunk_url(self) -> Optional[str]:
        return self.links.get("upload_chunk")

    @property
    def complete_url(self) -> Optional[str]:
        return self.links.get("complete")

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Advisory expiry check; the server remains the authority."""
        expires = parse_timestamp(self.expires_at)
        if expires is None:
            return False
        return expires < (now or datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.raw)


@dataclass(frozen=True)
class DownloadInfo:
    """Download details for a completed conversion."""

    download_url: Optional[str]
    filename: Optional[str] = None
    format: Optional[str] = None
    file_size: Optional[int] = None
    expires_at: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "DownloadInfo":
        return cls(
            download_url=data.get("download_url"),
            filename=data.get("filename"),
            format=data.get("format"),
            file_size=data.get("file_size"),
            expires_at=data.get("expires_at"),
            raw=copy.deepcopy(data),
        )

    @property
    def file_size_formatted(self) -> str:
        return format_file_size(self.file_size)

    def download_to(
        self,
        destination: Union[str, Path],
        http_client: Optional[httpx.Client] = None,
    ) -> Path:
        """
        Stream the converted file to a local path.

        The download URL is pre-signed, so the request goes out without the
        API credential and outside the client's retry policy.

        Args:
            destination: File path to write to
            http_client: Optional client to fetch with (a new one is created
                and closed otherwise)

        Returns:
            The destination path

        Raises:
            ConvertHubError: If there is no download URL, the fetch fails or
                the destination cannot be written
        """
        if not self.download_url:
            raise ConvertHubError("No download URL available")

        path = Path(destination)
        owns_client = http_client is None
        client = http_client or httpx.Client(
            timeout=DOWNLOAD_TIMEOUT, follow_redirects=True
        )

        logger.info("Downloading %s to %s", self.filename or self.download_url, path)

        written = False
        try:
            with client.stream("GET", self.download_url) as response:
                response.raise_for_status()
                with path.open("wb") as fh:
                    written = True
                    for chunk in response.iter_bytes(DOWNLOAD_CHUNK_SIZE):
                        fh.write(chunk)
        except (httpx.HTTPError, OSError) as e:
            if written:
                # Never leave a partial file behind
                path.unlink(missing_ok=True)
            raise ConvertHubError(f"Download failed: {e}") from e
        finally:
            if owns_client:
                client.close()

        return path

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.raw)


class ConversionOptions:
    """
    Fluent builder for optional conversion parameters.

    Example:
        >>> options = (
        ...     ConversionOptions()
        ...     .set_quality(90)
        ...     .set_resolution("1920x1080")
        ...     .add_metadata("project", "reports")
        ... )
        >>> job = client.conversions.convert("photo.png", "jpg", options)
    """

    def __init__(self):
        self._options: Dict[str, Any] = {}

    def _set_conversion_option(self, key: str, value: Any) -> "ConversionOptions":
        self._options.setdefault("options", {})[key] = value
        return self

    def set_output_filename(self, filename: str) -> "ConversionOptions":
        self._options["output_filename"] = filename
        return self

    def set_webhook_url(self, url: str) -> "ConversionOptions":
        self._options["webhook_url"] = url
        return self

    def set_quality(self, quality: int) -> "ConversionOptions":
        """Set output quality for lossy formats (1-100)."""
        return self._set_conversion_option("quality", validate_quality(quality))

    def set_resolution(self, resolution: str) -> "ConversionOptions":
        """Set output resolution, e.g. ``"1920x1080"``."""
        return self._set_conversion_option("resolution", resolution)

    def set_bitrate(self, bitrate: str) -> "ConversionOptions":
        """Set audio/video bitrate, e.g. ``"320k"``."""
        return self._set_conversion_option("bitrate", bitrate)

    def set_sample_rate(self, sample_rate: int) -> "ConversionOptions":
        return self._set_conversion_option("sample_rate", sample_rate)

    def set_option(self, key: str, value: Any) -> "ConversionOptions":
        return self._set_conversion_option(key, value)

    def add_metadata(self, key: str, value: Any) -> "ConversionOptions":
        self._options.setdefault("metadata", {})[key] = value
        return self

    def set_metadata(self, metadata: Dict[str, Any]) -> "ConversionOptions":
        self._options["metadata"] = dict(metadata)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._options)

    def __repr__(self) -> str:
        return f"ConversionOptions({self._options!r})"
