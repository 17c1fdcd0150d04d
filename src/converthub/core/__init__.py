"""
Core pure functions for the SDK.

This package contains I/O-free functions for request building, error
classification, the retry policy and validation.
"""

from .remote import (
    build_conversion_fields,
    build_upload_init_payload,
    build_url_payload,
    extract_error_details,
    map_status_code_to_exception,
    parse_http_error_response,
)

from .utils import (
    build_auth_header,
    build_default_headers,
    calculate_retry_delay,
    classify_request_exception,
    is_retryable_status,
    should_retry_request,
)

from .validation import (
    calculate_optimal_chunk_size,
    calculate_progress,
    calculate_total_chunks,
    format_file_size,
    parse_timestamp,
    validate_chunk_size,
    validate_direct_upload_size,
    validate_quality,
    validate_source_file,
)

__all__ = [
    # Remote functions
    "build_conversion_fields",
    "build_upload_init_payload",
    "build_url_payload",
    "extract_error_details",
    "map_status_code_to_exception",
    "parse_http_error_response",
    # Retry and header functions
    "build_auth_header",
    "build_default_headers",
    "calculate_retry_delay",
    "classify_request_exception",
    "is_retryable_status",
    "should_retry_request",
    # Validation functions
    "calculate_optimal_chunk_size",
    "calculate_progress",
    "calculate_total_chunks",
    "format_file_size",
    "parse_timestamp",
    "validate_chunk_size",
    "validate_direct_upload_size",
    "validate_quality",
    "validate_source_file",
]
