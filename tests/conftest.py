"""
Pytest configuration and shared fixtures.
"""

import asyncio
from typing import Callable, List

import httpx
import pytest
from loguru import logger

from config.models import Endpoint, RunConfig
from config.settings import PingerSettings
from monitoring.http_client import build_http_client
from monitoring.probe import ProbeOutcome, ProbeResult


@pytest.fixture
def log_records():
    """Capture every loguru record emitted during the test."""
    records = []
    handler_id = logger.add(
        lambda message: records.append(message.record),
        level="DEBUG",
        format="{message}",
    )
    yield records
    logger.remove(handler_id)


def messages(records, level: str = None) -> List[str]:
    """Messages of the captured records, optionally filtered by level name."""
    return [
        record["message"]
        for record in records
        if level is None or record["level"].name == level
    ]


@pytest.fixture
def settings():
    """Process settings isolated from the environment's .env file."""
    return PingerSettings(
        _env_file=None,
        timezone="UTC",
        max_overlapping_firings=5,
    )


@pytest.fixture
def endpoint():
    return Endpoint(name="Test", url="https://example.com/health", method="GET")


@pytest.fixture
def make_client() -> Callable[..., httpx.AsyncClient]:
    """Build the shared client over an httpx.MockTransport handler."""
    def _make(handler, **config_fields) -> httpx.AsyncClient:
        config = RunConfig(**config_fields)
        return build_http_client(config, transport=httpx.MockTransport(handler))
    return _make


class RecordingExecutor:
    """Stand-in for ProbeExecutor that records which endpoints were probed."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls: List[str] = []
        self.finished: List[str] = []

    async def execute(self, client, endpoint, api_key_header_name, api_key, user_agent):
        self.calls.append(endpoint.name)
        if self.delay:
            await asyncio.sleep(self.delay)
        self.finished.append(endpoint.name)
        return ProbeResult(
            endpoint_name=endpoint.name,
            method=endpoint.method or "GET",
            url=endpoint.url,
            outcome=ProbeOutcome.SUCCESS,
            status_code=200,
            status_text="200 OK",
            duration=self.delay,
        )


@pytest.fixture
def recording_executor():
    return RecordingExecutor()
