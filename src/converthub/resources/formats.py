"""
Format discovery operations.
"""

from typing import Any, Dict

from ..exceptions import ApiError
from ..transport import Transport


class FormatsResource:
    """Lists formats and checks which conversions the API supports."""

    def __init__(self, transport: Transport):
        self._transport = transport

    def all(self) -> Dict[str, Any]:
        return self._transport.execute("GET", "formats")

    def get_conversions(self, format: str) -> Dict[str, Any]:
        return self._transport.execute("GET", f"formats/{format}/conversions")

    def check_support(self, source_format: str, target_format: str) -> Dict[str, Any]:
        return self._transport.execute(
            "GET", f"formats/{source_format}/to/{target_format}"
        )

    def get_supported_conversions(self) -> Dict[str, Any]:
        return self._transport.execute("GET", "formats/supported-conversions")

    def is_supported(self, format: str) -> bool:
        """Check whether a source format is known; unknown formats answer 404."""
        try:
            response = self.get_conversions(format)
        except ApiError as e:
            if e.status_code == 404:
                return False
            raise
        return bool(response.get("success", False))

    def is_conversion_supported(self, source_format: str, target_format: str) -> bool:
        try:
            response = self.check_support(source_format, target_format)
        except ApiError as e:
            if e.status_code == 404:
                return False
            raise
        return bool(response.get("supported", False))
