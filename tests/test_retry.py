"""Tests for RetryPolicy failure classification and backoff."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from satisfactory_api import (
    CallError,
    CallResult,
    ErrorKind,
    RetryPolicy,
    SatisfactoryConnectionError,
    SatisfactoryDecodeError,
    SatisfactoryResponseError,
    SatisfactoryTimeout,
)


class TestRetryableFailures:
    """Timeouts and connection errors are retried with linear backoff."""

    async def test_timeout_retried_until_exhausted(
        self, fake_sleep: Any, recorded_delays: list[float]
    ) -> None:
        attempt = AsyncMock(side_effect=SatisfactoryTimeout("request exceeded 10s"))
        policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=fake_sleep)

        result = await policy.execute(attempt, description="HealthCheck")

        assert attempt.await_count == 3
        assert recorded_delays == [1.0, 2.0]
        assert result.is_failure
        assert result.error.kind is ErrorKind.TIMEOUT
        assert result.error.attempts == 3
        assert result.error.message == (
            "Connection timeout after 3 attempts: request exceeded 10s"
        )

    async def test_connection_error_recovers_on_later_attempt(
        self, fake_sleep: Any, recorded_delays: list[float]
    ) -> None:
        attempt = AsyncMock(
            side_effect=[
                SatisfactoryConnectionError("Connection refused"),
                CallResult.success("ok"),
            ]
        )
        policy = RetryPolicy(max_attempts=3, base_delay=0.5, sleep=fake_sleep)

        result = await policy.execute(attempt)

        assert result.is_success
        assert result.data == "ok"
        assert attempt.await_count == 2
        assert recorded_delays == [0.5]

    async def test_network_error_message_after_exhaustion(self, fake_sleep: Any) -> None:
        attempt = AsyncMock(side_effect=SatisfactoryConnectionError("Connection reset"))
        policy = RetryPolicy(max_attempts=2, sleep=fake_sleep)

        result = await policy.execute(attempt)

        assert result.error.kind is ErrorKind.TRANSPORT
        assert result.error.message == "Network error after 2 attempts: Connection reset"

    async def test_single_attempt_policy_never_sleeps(
        self, fake_sleep: Any, recorded_delays: list[float]
    ) -> None:
        attempt = AsyncMock(side_effect=SatisfactoryTimeout("slow"))
        policy = RetryPolicy(max_attempts=1, sleep=fake_sleep)

        result = await policy.execute(attempt)

        assert attempt.await_count == 1
        assert recorded_delays == []
        assert result.error.attempts == 1


class TestNonRetryableFailures:
    """Deterministic rejections are returned on first occurrence."""

    async def test_http_error_not_retried(
        self, fake_sleep: Any, recorded_delays: list[float]
    ) -> None:
        attempt = AsyncMock(side_effect=SatisfactoryResponseError(401, "insufficient_scope"))
        policy = RetryPolicy(sleep=fake_sleep)

        result = await policy.execute(attempt)

        assert attempt.await_count == 1
        assert recorded_delays == []
        assert result.error.kind is ErrorKind.HTTP
        assert result.error.status == 401
        assert result.error.body == "insufficient_scope"
        assert result.error.insufficient_scope is True

    async def test_http_error_after_timeout_stops_retrying(
        self, fake_sleep: Any, recorded_delays: list[float]
    ) -> None:
        attempt = AsyncMock(
            side_effect=[
                SatisfactoryTimeout("request exceeded 10s"),
                SatisfactoryResponseError(500, "boom"),
            ]
        )
        policy = RetryPolicy(max_attempts=3, base_delay=1.0, sleep=fake_sleep)

        result = await policy.execute(attempt)

        assert attempt.await_count == 2
        assert recorded_delays == [1.0]
        assert result.error.kind is ErrorKind.HTTP
        assert result.error.attempts == 2
        assert result.error.message == "HTTP 500: boom"

    async def test_decode_error_not_retried(self, fake_sleep: Any) -> None:
        attempt = AsyncMock(side_effect=SatisfactoryDecodeError("bad body"))
        policy = RetryPolicy(sleep=fake_sleep)

        result = await policy.execute(attempt)

        assert attempt.await_count == 1
        assert result.error.kind is ErrorKind.DECODE

    async def test_unexpected_exception_not_retried(self, fake_sleep: Any) -> None:
        attempt = AsyncMock(side_effect=RuntimeError("boom"))
        policy = RetryPolicy(sleep=fake_sleep)

        result = await policy.execute(attempt)

        assert attempt.await_count == 1
        assert result.error.kind is ErrorKind.UNEXPECTED
        assert result.error.message == "Connection error: boom"

    async def test_returned_failure_passed_through(self, fake_sleep: Any) -> None:
        failure = CallResult.failure(
            CallError(kind=ErrorKind.DECODE, message="Failed to parse response: x")
        )
        attempt = AsyncMock(return_value=failure)

        result = await RetryPolicy(sleep=fake_sleep).execute(attempt)

        assert result is failure
        assert attempt.await_count == 1


class TestRetryPolicySettings:
    """Tests for policy validation and delay schedule."""

    def test_delay_schedule_is_linear(self) -> None:
        policy = RetryPolicy(base_delay=1.5)
        assert [policy.delay_before(k) for k in (1, 2, 3, 4)] == [0.0, 1.5, 3.0, 4.5]

    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.base_delay == 1.0

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"max_attempts": 0}, "max_attempts"),
            ({"base_delay": -1.0}, "base_delay"),
        ],
    )
    def test_invalid_settings_rejected(self, kwargs: dict[str, Any], message: str) -> None:
        with pytest.raises(ValueError, match=message):
            RetryPolicy(**kwargs)
