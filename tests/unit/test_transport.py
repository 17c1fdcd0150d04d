"""
Test the request pipeline: authentication, decoding, classification and retries.
"""

from unittest.mock import patch

import httpx
import pytest

from converthub import ClientConfig, ConvertHubClient
from converthub.config import USER_AGENT
from converthub.exceptions import (
    ApiError,
    AuthenticationError,
    ConvertHubError,
    ValidationError,
)
from converthub.transport import Transport
from tests.helpers.api import FakeApi, error_response, json_response


def _client(fake_api: FakeApi, **config) -> ConvertHubClient:
    return ConvertHubClient("test-api-key", ClientConfig(**config), transport=fake_api.transport)


class TestRequestHeaders:
    def test_bearer_token_on_every_request(self, client, fake_api):
        fake_api.add("GET", "health", json_response(200, {"status": "healthy"}))
        fake_api.add("GET", "account", json_response(200, {"credits_remaining": 1}))

        client.health()
        client.get_account()

        assert len(fake_api.requests) == 2
        for request in fake_api.requests:
            assert request.headers["Authorization"] == "Bearer test-api-key"

    def test_bearer_token_overrides_caller_value(self, client, fake_api):
        fake_api.add("GET", "health", json_response())

        client.request("GET", "health", headers={"Authorization": "Bearer someone-else"})

        assert fake_api.requests[0].headers["Authorization"] == "Bearer test-api-key"

    def test_default_headers(self, client, fake_api):
        fake_api.add("GET", "health", json_response())

        client.health()

        request = fake_api.requests[0]
        assert request.headers["Accept"] == "application/json"
        assert request.headers["User-Agent"] == USER_AGENT

    def test_versioned_base_url(self, fake_api):
        fake_api.add("GET", "health", json_response())
        client = _client(fake_api, base_url="https://convert.example.com/")

        client.health()

        assert str(fake_api.requests[0].url) == "https://convert.example.com/v2/health"

    def test_http_options_layer_headers(self, fake_api):
        fake_api.add("GET", "health", json_response())
        client = _client(fake_api, http_options={"headers": {"X-Trace": "abc"}})

        client.health()

        request = fake_api.requests[0]
        assert request.headers["X-Trace"] == "abc"
        assert request.headers["Accept"] == "application/json"

    def test_timeouts_from_config(self, fake_api):
        client = _client(fake_api, timeout=12, connect_timeout=3)

        timeout = client.http_client.timeout
        assert timeout.read == 12
        assert timeout.connect == 3

    def test_transport_requires_api_key(self):
        with pytest.raises(ConvertHubError, match="API key is required"):
            Transport("", ClientConfig())


class TestResponseHandling:
    def test_success_body_returned_as_is(self, client, fake_api):
        body = {"success": True, "status": "healthy", "api_version": "v2"}
        fake_api.add("GET", "health", json_response(200, body))

        assert client.health() == body

    def test_invalid_json_on_success(self, client, fake_api):
        fake_api.add("GET", "health", httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(ApiError, match="Invalid JSON response") as exc_info:
            client.health()

        assert exc_info.value.status_code == 200

    def test_invalid_json_on_error_status(self, fake_api):
        fake_api.add("GET", "health", httpx.Response(400, content=b"Bad gateway page"))
        client = _client(fake_api)

        with pytest.raises(ApiError, match="Invalid JSON response"):
            client.health()

        assert len(fake_api.requests) == 1

    def test_empty_body_is_invalid_json(self, client, fake_api):
        fake_api.add("DELETE", "jobs/j1", httpx.Response(204))

        with pytest.raises(ApiError, match="Invalid JSON response"):
            client.jobs.cancel("j1")

    def test_null_body_is_rejected(self, client, fake_api):
        fake_api.add("GET", "jobs/job_1", httpx.Response(200, content=b"null"))

        with pytest.raises(ApiError, match="expected an object") as exc_info:
            client.jobs.get_status("job_1")

        assert exc_info.value.status_code == 200

    @pytest.mark.parametrize("body", [[1, 2], [], "ok", 42])
    def test_non_object_body_is_rejected(self, client, fake_api, body):
        fake_api.add("GET", "formats/pdf/conversions", httpx.Response(200, json=body))

        with pytest.raises(ApiError, match="expected an object"):
            client.formats.is_supported("pdf")

        assert len(fake_api.requests) == 1

    def test_authentication_error(self, client, fake_api):
        fake_api.add(
            "GET",
            "health",
            error_response(
                401,
                "AUTHENTICATION_REQUIRED",
                "Authentication is required",
                {"hint": "Please include a valid Bearer token"},
            ),
        )

        with pytest.raises(AuthenticationError, match="Authentication is required") as exc_info:
            client.health()

        assert exc_info.value.status_code == 401
        assert exc_info.value.details == {"hint": "Please include a valid Bearer token"}

    def test_validation_error(self, client, fake_api):
        fake_api.add(
            "POST",
            "convert-url",
            error_response(
                422,
                "VALIDATION_ERROR",
                "The given data was invalid",
                {"validation_errors": {"file_url": ["Invalid URL"]}, "failed_fields": ["file_url"]},
            ),
        )

        with pytest.raises(ValidationError) as exc_info:
            client.conversions.convert_from_url("not-a-url", "pdf")

        assert exc_info.value.failed_fields == ["file_url"]
        assert exc_info.value.status_code == 422

    def test_api_error_keeps_code_and_details(self, client, fake_api):
        fake_api.add(
            "GET",
            "health",
            error_response(
                400,
                "CONVERSION_NOT_SUPPORTED",
                "Conversion not supported",
                {"source_format": "xyz", "target_format": "abc"},
            ),
        )

        with pytest.raises(ApiError) as exc_info:
            client.health()

        assert type(exc_info.value) is ApiError
        assert exc_info.value.error_code == "CONVERSION_NOT_SUPPORTED"
        assert exc_info.value.details["source_format"] == "xyz"

    @pytest.mark.parametrize("status_code", [400, 402, 404, 409, 418, 422, 500, 502, 503])
    def test_status_and_code_match_body(self, fake_api, status_code):
        fake_api.add("GET", "health", error_response(status_code, "SOME_CODE", "msg"))
        client = _client(fake_api, retry_enabled=False)

        with pytest.raises(ApiError) as exc_info:
            client.health()

        assert exc_info.value.status_code == status_code
        assert exc_info.value.error_code == "SOME_CODE"

    def test_error_body_without_error_object(self, fake_api):
        fake_api.add("GET", "health", httpx.Response(418, json={"success": False}))
        client = _client(fake_api)

        with pytest.raises(ApiError) as exc_info:
            client.health()

        assert exc_info.value.message == "Unknown error"
        assert exc_info.value.error_code == "UNKNOWN_ERROR"

    def test_rate_limit_message(self, fake_api):
        fake_api.add(
            "GET",
            "health",
            error_response(429, "RATE_LIMIT_EXCEEDED", "Too many requests", {"retry_after": 15}),
        )
        client = _client(fake_api, retry_enabled=False)

        with pytest.raises(ApiError) as exc_info:
            client.health()

        assert exc_info.value.status_code == 429
        assert str(exc_info.value) == "Too many requests (retry after 15 seconds)"


class TestRetryPolicy:
    def test_always_failing_server_error_exhausts_retries(self, fake_api):
        fake_api.add("GET", "health", error_response(500, "SERVER_ERROR", "Internal error"))
        client = _client(fake_api, max_retries=3)

        with patch("converthub.transport.time.sleep") as sleep:
            with pytest.raises(ApiError) as exc_info:
                client.health()

        # initial attempt + 3 retries
        assert len(fake_api.requests) == 4
        assert [c.args[0] for c in sleep.call_args_list] == [1.0, 2.0, 3.0]
        assert exc_info.value.status_code == 500

    def test_succeeds_on_later_attempt(self, fake_api):
        fake_api.add(
            "GET",
            "health",
            error_response(503, "UNAVAILABLE"),
            error_response(502, "BAD_GATEWAY"),
            json_response(200, {"status": "healthy"}),
        )
        client = _client(fake_api, max_retries=3)

        with patch("converthub.transport.time.sleep") as sleep:
            assert client.health() == {"status": "healthy"}

        assert len(fake_api.requests) == 3
        assert sleep.call_count == 2

    def test_retries_rate_limit(self, fake_api):
        fake_api.add(
            "GET",
            "health",
            error_response(429, "RATE_LIMIT_EXCEEDED", "Too many requests"),
            json_response(200, {"status": "healthy"}),
        )
        client = _client(fake_api, retry_backoff=0)

        assert client.health() == {"status": "healthy"}
        assert len(fake_api.requests) == 2

    @pytest.mark.parametrize("status_code", [400, 401, 403, 404, 422])
    def test_client_errors_are_not_retried(self, fake_api, status_code):
        fake_api.add("GET", "health", error_response(status_code, "NOPE"))
        client = _client(fake_api, retry_backoff=0)

        with pytest.raises(ApiError):
            client.health()

        assert len(fake_api.requests) == 1

    def test_transport_error_retried_then_succeeds(self, fake_api):
        fake_api.add(
            "GET",
            "health",
            httpx.ConnectError("Connection refused"),
            httpx.ReadTimeout("Read timed out"),
            json_response(200, {"status": "healthy"}),
        )
        client = _client(fake_api, retry_backoff=0)

        assert client.health() == {"status": "healthy"}
        assert len(fake_api.requests) == 3

    def test_transport_error_exhausted(self, fake_api):
        fake_api.add("GET", "health", httpx.ConnectError("Connection refused"))
        client = _client(fake_api, max_retries=2, retry_backoff=0)

        with pytest.raises(ApiError, match="Request failed: Connection refused") as exc_info:
            client.health()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert len(fake_api.requests) == 3

    def test_retry_disabled(self, fake_api):
        fake_api.add("GET", "health", error_response(503, "UNAVAILABLE"))
        client = _client(fake_api, retry_enabled=False)

        with patch("converthub.transport.time.sleep") as sleep:
            with pytest.raises(ApiError):
                client.health()

        assert len(fake_api.requests) == 1
        sleep.assert_not_called()

    def test_invalid_json_not_retried(self, fake_api):
        fake_api.add("GET", "health", httpx.Response(200, content=b"{broken"))
        client = _client(fake_api, retry_backoff=0)

        with pytest.raises(ApiError):
            client.health()

        assert len(fake_api.requests) == 1

    def test_custom_backoff(self, fake_api):
        fake_api.add("GET", "health", error_response(500, "SERVER_ERROR"))
        client = _client(fake_api, max_retries=2, retry_backoff=0.25)

        with patch("converthub.transport.time.sleep") as sleep:
            with pytest.raises(ApiError):
                client.health()

        assert [c.args[0] for c in sleep.call_args_list] == [0.25, 0.5]
