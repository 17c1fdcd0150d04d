"""
Chunked upload operations for large files.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

from ..config import get_logger
from ..core.remote import build_upload_init_payload
from ..core.validation import (
    calculate_optimal_chunk_size,
    calculate_progress,
    calculate_total_chunks,
    validate_chunk_size,
    validate_source_file,
)
from ..exceptions import ConvertHubError, ValidationError
from ..models import ConversionJob, UploadSession
from ..transport import Transport
from .conversions import OptionsArg, normalize_options

logger = get_logger("uploads")

ProgressCallback = Callable[[int, int, float], None]


class ChunkedUploadResource:
    """Uploads large files in sequential chunks and converts them server-side."""

    def __init__(self, transport: Transport):
        self._transport = transport

    def init_session(
        self,
        filename: str,
        file_size: int,
        total_chunks: int,
        target_format: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> UploadSession:
        payload = build_upload_init_payload(
            filename, file_size, total_chunks, target_format, options or {}
        )
        response = self._transport.execute("POST", "upload/init", json=payload)
        return UploadSession.from_response(response)

    def upload_chunk(
        self, session_id: str, chunk_index: int, chunk_data: bytes
    ) -> Dict[str, Any]:
        return self._transport.execute(
            "POST",
            f"upload/{session_id}/chunks/{chunk_index}",
            files={"chunk": (f"chunk_{chunk_index}", chunk_data)},
        )

    def complete(self, session_id: str) -> ConversionJob:
        """Finish the session; the API assembles the chunks and starts converting."""
        response = self._transport.execute("POST", f"upload/{session_id}/complete")
        return ConversionJob.from_response(response)

    def calculate_optimal_chunk_size(self, file_size: int) -> int:
        return calculate_optimal_chunk_size(file_size)

    def upload_large_file(
        self,
        file_path: Union[str, Path],
        target_format: str,
        options: OptionsArg = None,
        chunk_size: Optional[int] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ConversionJob:
        """
        Upload a file in chunks and start converting it.

        Chunks are sent one at a time in index order; the server reassembles
        them by index.

        Args:
            file_path: Path to the file to upload
            target_format: Target format for the conversion
            options: Extra fields for the ``upload/init`` payload
            chunk_size: Chunk size in bytes; picked from the file size if omitted
            progress_callback: Called after each chunk with
                (completed chunks, total chunks, percentage)

        Returns:
            The ConversionJob started by completing the session

        Raises:
            ValidationError: If the file is missing or cannot be opened
            ConvertHubError: If chunk_size is not positive or the file
                changes size during the upload
            ApiError: If any API call fails

        Example:
            >>> def on_progress(done, total, percent):
            ...     print(f"{done}/{total} ({percent:.0f}%)")
            >>> job = client.chunked_upload.upload_large_file(
            ...     "video.mov", "mp4", progress_callback=on_progress
            ... )
        """
        path = validate_source_file(file_path)
        file_size = path.stat().st_size

        if chunk_size is None:
            chunk_size = calculate_optimal_chunk_size(file_size)
        else:
            validate_chunk_size(chunk_size)

        total_chunks = calculate_total_chunks(file_size, chunk_size)

        try:
            handle = path.open("rb")
        except OSError as e:
            raise ValidationError(
                f"Cannot open file for reading: {file_path}", error_code="FILE_UNREADABLE"
            ) from e

        with handle:
            session = self.init_session(
                path.name,
                file_size,
                total_chunks,
                target_format,
                normalize_options(options),
            )
            logger.info(
                "Uploading %s in %d chunks of %d bytes (session %s)",
                path.name,
                total_chunks,
                chunk_size,
                session.session_id,
            )

            for index in range(total_chunks):
                expected = min(chunk_size, file_size - index * chunk_size)
                chunk = handle.read(expected)
                if len(chunk) != expected:
                    raise ConvertHubError(f"Failed to read chunk {index} from file")

                self.upload_chunk(session.session_id, index, chunk)
                logger.debug("Uploaded chunk %d/%d", index + 1, total_chunks)

                if progress_callback:
                    completed = index + 1
                    progress_callback(
                        completed, total_chunks, calculate_progress(completed, total_chunks)
                    )

        return self.complete(session.session_id)
