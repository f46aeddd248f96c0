"""Pytest configuration and fixtures for satisfactory_api tests."""

from __future__ import annotations

import json
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from satisfactory_api import AuthContext, Endpoint, RetryPolicy, SatisfactoryApiClient


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


@pytest.fixture
def recorded_delays() -> list[float]:
    """Backoff delays requested by a RetryPolicy using ``fake_sleep``."""
    return []


@pytest.fixture
def fake_sleep(recorded_delays: list[float]) -> Any:
    """Sleep replacement that records the delay and returns immediately."""

    async def _sleep(delay: float) -> None:
        recorded_delays.append(delay)

    return _sleep


@pytest.fixture
def client(mock_session: MagicMock, fake_sleep: Any) -> SatisfactoryApiClient:
    """Client bound to the mock session with an instant-sleep retry policy."""
    return SatisfactoryApiClient(
        Endpoint("192.168.1.50", 7777),
        auth=AuthContext(),
        session=mock_session,
        retry_policy=RetryPolicy(max_attempts=3, base_delay=1.0, sleep=fake_sleep),
    )


def create_mock_response(
    status: int = 200,
    read_data: bytes = b"",
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        read_data: Data to return from read() call

    Returns:
        Configured AsyncMock response usable as an async context manager
    """
    response = AsyncMock()
    response.status = status
    response.read.return_value = read_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


def posted_envelope(mock_session: MagicMock, index: int = -1) -> dict[str, Any]:
    """Decode the JSON envelope sent in a recorded post() call."""
    call = mock_session.post.call_args_list[index]
    return json.loads(call.kwargs["data"])
