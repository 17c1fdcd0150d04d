"""
Pure functions for remote API operations.

Functions for building request payloads and turning error responses into
SDK exceptions without I/O dependencies.
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from ..exceptions import ApiError, AuthenticationError, ValidationError

DEFAULT_ERROR_MESSAGE = "Unknown error"
DEFAULT_ERROR_CODE = "UNKNOWN_ERROR"
VALIDATION_ERROR_CODE = "VALIDATION_ERROR"
DEFAULT_RETRY_AFTER = 60


def extract_error_details(
    response_data: Any,
) -> Tuple[str, str, Optional[Dict[str, Any]]]:
    """Extract message, code and details from an error body."""
    error = response_data.get("error") if isinstance(response_data, dict) else None
    if not isinstance(error, dict):
        error = {}

    message = error.get("message")
    if message is None:
        message = DEFAULT_ERROR_MESSAGE
    code = error.get("code")
    if code is None:
        code = DEFAULT_ERROR_CODE
    details = error.get("details")
    return message, code, details


def map_status_code_to_exception(
    status_code: int,
    message: str,
    error_code: str,
    details: Optional[Dict[str, Any]],
) -> ApiError:
    """Map HTTP status codes to appropriate SDK exceptions."""
    if status_code in (401, 403):
        return AuthenticationError(message, status_code, error_code, details)
    elif status_code in (400, 422):
        if error_code == VALIDATION_ERROR_CODE:
            return ValidationError(message, status_code, error_code, details)
        return ApiError(message, status_code, error_code, details)
    elif status_code == 404:
        return ApiError(message, 404, error_code, details)
    elif status_code == 429:
        retry_after = DEFAULT_RETRY_AFTER
        if isinstance(details, dict) and details.get("retry_after") is not None:
            retry_after = details["retry_after"]
        return ApiError(
            f"{message} (retry after {retry_after} seconds)",
            429,
            error_code,
            details,
        )
    else:
        return ApiError(message, status_code, error_code, details)


def parse_http_error_response(response_data: Any, status_code: int) -> ApiError:
    """Parse an HTTP error response and return the matching exception."""
    message, code, details = extract_error_details(response_data)
    return map_status_code_to_exception(status_code, message, code, details)


def build_conversion_fields(
    target_format: str, options: Mapping[str, Any]
) -> Dict[str, str]:
    """Build the form fields of a multipart conversion request.

    Nested ``options`` and ``metadata`` maps are flattened into
    ``options[key]`` and ``metadata[key]`` fields.
    """
    fields = {"target_format": target_format}

    for key in ("output_filename", "webhook_url"):
        if options.get(key) is not None:
            fields[key] = str(options[key])

    for group in ("options", "metadata"):
        for key, value in (options.get(group) or {}).items():
            fields[f"{group}[{key}]"] = stringify_form_value(value)

    return fields


def stringify_form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def build_url_payload(
    file_url: str, target_format: str, options: Mapping[str, Any]
) -> Dict[str, Any]:
    """Build the JSON payload for a URL conversion."""
    payload = dict(options)
    payload.update({"file_url": file_url, "target_format": target_format})
    return payload


def build_upload_init_payload(
    filename: str,
    file_size: int,
    total_chunks: int,
    target_format: str,
    options: Mapping[str, Any],
) -> Dict[str, Any]:
    """Build the JSON payload that opens a chunked upload session."""
    payload = dict(options)
    payload.update(
        {
            "filename": filename,
            "file_size": file_size,
            "total_chunks": total_chunks,
            "target_format": target_format,
        }
    )
    return payload
