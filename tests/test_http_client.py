"""
Tests for the shared HTTP client and the logging transport.
"""

import httpx
import pytest

from config.models import RunConfig
from monitoring.http_client import (
    LoggingTransport,
    build_http_client,
    dump_request,
    dump_response,
)
from tests.conftest import messages


def _ok(request):
    return httpx.Response(200, headers={"X-Trace": "abc"}, text="body")


class TestDumps:
    """Test cases for the wire-style dumps."""

    def test_dump_request(self):
        request = httpx.Request(
            "GET", "https://example.com/a/b?c=1", headers={"X-Api-Key": "k"}
        )

        dump = dump_request(request)

        assert dump.startswith("GET /a/b?c=1 HTTP/1.1\r\n")
        assert "x-api-key: k" in dump.lower()
        assert dump.endswith("\r\n")

    def test_dump_response_has_no_body(self):
        response = httpx.Response(404, headers={"X-Trace": "abc"}, text="secret body")

        dump = dump_response(response)

        assert dump.startswith("HTTP/1.1 404 Not Found\r\n")
        assert "x-trace: abc" in dump.lower()
        assert "secret body" not in dump


class TestLoggingTransport:
    """Test cases for LoggingTransport."""

    @pytest.mark.asyncio
    async def test_enabled_logs_request_and_response(self, log_records):
        transport = LoggingTransport(httpx.MockTransport(_ok), enabled=True)

        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("https://example.com/health")

        assert response.status_code == 200
        assert response.text == "body"
        debug = messages(log_records, "DEBUG")
        assert len(debug) == 2
        assert debug[0].startswith("[HTTP Request]\nGET /health HTTP/1.1")
        assert debug[1].startswith("[HTTP Response]\nHTTP/1.1 200 OK")

    @pytest.mark.asyncio
    async def test_disabled_is_silent(self, log_records):
        transport = LoggingTransport(httpx.MockTransport(_ok), enabled=False)

        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("https://example.com/health")

        assert response.status_code == 200
        assert log_records == []

    @pytest.mark.asyncio
    async def test_errors_are_logged_and_reraised(self, log_records):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        transport = LoggingTransport(httpx.MockTransport(handler), enabled=True)

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(httpx.ConnectError):
                await client.get("https://example.com/health")

        debug = messages(log_records, "DEBUG")
        assert debug[0].startswith("[HTTP Request]")
        assert debug[1].startswith("[HTTP Error] GET https://example.com/health:")

    @pytest.mark.asyncio
    async def test_injected_logger_is_used(self):
        lines = []

        class ListLogger:
            def debug(self, message):
                lines.append(message)

        transport = LoggingTransport(
            httpx.MockTransport(_ok), enabled=True, logger=ListLogger()
        )

        async with httpx.AsyncClient(transport=transport) as client:
            await client.get("https://example.com/")

        assert len(lines) == 2


class TestBuildHttpClient:
    """Test cases for build_http_client."""

    @pytest.mark.asyncio
    async def test_zero_timeout_disables_timeout(self):
        async with build_http_client(RunConfig(timeout_seconds=0)) as client:
            assert client.timeout.connect is None
            assert client.timeout.read is None

    @pytest.mark.asyncio
    async def test_timeout_applies_to_every_phase(self):
        async with build_http_client(RunConfig(timeout_seconds=7)) as client:
            assert client.timeout.connect == 7.0
            assert client.timeout.read == 7.0
            assert client.timeout.write == 7.0
            assert client.timeout.pool == 7.0

    @pytest.mark.asyncio
    async def test_redirect_policy(self):
        async with build_http_client(RunConfig()) as client:
            assert client.follow_redirects is True
            assert client.max_redirects == 10

    @pytest.mark.asyncio
    async def test_http_logging_flag_reaches_transport(self, log_records):
        config = RunConfig(http_logging_enabled=True)

        async with build_http_client(config, transport=httpx.MockTransport(_ok)) as client:
            await client.get("https://example.com/")

        assert any(m.startswith("[HTTP Request]") for m in messages(log_records, "DEBUG"))
