"""
File conversion operations.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..config import get_logger
from ..core.remote import build_conversion_fields, build_url_payload
from ..core.validation import validate_direct_upload_size, validate_source_file
from ..exceptions import ValidationError
from ..models import ConversionJob, ConversionOptions
from ..transport import Transport

logger = get_logger("conversions")

OptionsArg = Optional[Union[Mapping[str, Any], ConversionOptions]]


def normalize_options(options: OptionsArg) -> Dict[str, Any]:
    if options is None:
        return {}
    if isinstance(options, ConversionOptions):
        return options.to_dict()
    return dict(options)


class ConversionsResource:
    """Starts conversions from local files or remote URLs."""

    def __init__(self, transport: Transport):
        self._transport = transport

    def convert(
        self,
        file_path: Union[str, Path],
        target_format: str,
        options: OptionsArg = None,
    ) -> ConversionJob:
        """
        Upload a local file and start converting it.

        Files above 50MB must go through ``client.chunked_upload`` instead.

        Args:
            file_path: Path to the file to convert
            target_format: Target format, e.g. ``"docx"``
            options: Dict or ConversionOptions with output_filename,
                webhook_url, options and metadata

        Returns:
            The queued ConversionJob

        Raises:
            ValidationError: If the file is missing, unreadable or too large
            ApiError: If the API rejects the request

        Example:
            >>> job = client.conversions.convert(
            ...     "report.pdf", "docx", {"output_filename": "report.docx"}
            ... )
        """
        path = validate_source_file(file_path)
        validate_direct_upload_size(path.stat().st_size)

        try:
            content = path.read_bytes()
        except OSError as e:
            raise ValidationError(
                f"Cannot open file for reading: {file_path}", error_code="FILE_UNREADABLE"
            ) from e

        fields = build_conversion_fields(target_format, normalize_options(options))

        logger.info("Converting %s (%d bytes) to %s", path.name, len(content), target_format)

        response = self._transport.execute(
            "POST",
            "convert",
            data=fields,
            files={"file": (path.name, content)},
        )
        return ConversionJob.from_response(response)

    def convert_from_url(
        self,
        file_url: str,
        target_format: str,
        options: OptionsArg = None,
    ) -> ConversionJob:
        """Start converting a file the API fetches from ``file_url``."""
        payload = build_url_payload(file_url, target_format, normalize_options(options))

        logger.info("Converting %s to %s", file_url, target_format)

        response = self._transport.execute("POST", "convert-url", json=payload)
        return ConversionJob.from_response(response)

    def options(self) -> ConversionOptions:
        """Create a new options builder."""
        return ConversionOptions()
