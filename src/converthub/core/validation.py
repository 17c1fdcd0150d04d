"""
Pure functions for validation operations.

Functions for local file checks, chunk sizing and value formatting
without network dependencies.
"""

import math
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from ..exceptions import ConvertHubError, ValidationError

MB = 1024 * 1024

MAX_DIRECT_UPLOAD_SIZE = 50 * MB

# (upper bound inclusive, chunk size)
CHUNK_SIZE_TIERS = (
    (10 * MB, 1 * MB),
    (100 * MB, 5 * MB),
    (500 * MB, 10 * MB),
)
MAX_CHUNK_SIZE = 25 * MB

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def validate_source_file(file_path: Union[str, Path]) -> Path:
    """Check that a local file exists and is readable."""
    if not file_path or not str(file_path).strip():
        raise ValidationError("File path cannot be empty", error_code="FILE_NOT_FOUND")

    path = Path(file_path)
    if not path.is_file():
        raise ValidationError(f"File not found: {file_path}", error_code="FILE_NOT_FOUND")

    if not os.access(path, os.R_OK):
        raise ValidationError(
            f"Cannot open file for reading: {file_path}", error_code="FILE_UNREADABLE"
        )

    return path


def validate_direct_upload_size(size: int) -> None:
    if size > MAX_DIRECT_UPLOAD_SIZE:
        raise ValidationError(
            "File size exceeds 50MB limit for direct upload. "
            "Please use chunked upload for large files.",
            error_code="FILE_TOO_LARGE",
            details={"file_size": size, "limit": MAX_DIRECT_UPLOAD_SIZE},
        )


def validate_quality(quality: int) -> int:
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ConvertHubError("Quality must be an integer between 1 and 100")
    if quality < 1 or quality > 100:
        raise ConvertHubError("Quality must be between 1 and 100")
    return quality


def validate_chunk_size(chunk_size: int) -> int:
    if chunk_size <= 0:
        raise ConvertHubError(f"Chunk size must be positive, got {chunk_size}")
    return chunk_size


def calculate_optimal_chunk_size(file_size: int) -> int:
    """Pick a chunk size for a file of the given size in bytes."""
    for upper_bound, chunk_size in CHUNK_SIZE_TIERS:
        if file_size <= upper_bound:
            return chunk_size
    return MAX_CHUNK_SIZE


def calculate_total_chunks(file_size: int, chunk_size: int) -> int:
    return math.ceil(file_size / chunk_size)


def calculate_progress(completed: int, total: int) -> float:
    return completed / total * 100


def format_file_size(size: Optional[int]) -> str:
    """Format a byte count as a human-readable string, e.g. ``1.5 MB``."""
    if size is None:
        return "Unknown"

    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1

    rounded = round(value, 2)
    text = f"{rounded:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None

    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
