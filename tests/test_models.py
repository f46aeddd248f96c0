"""Tests for CallResult, CallError and response shapes."""

from __future__ import annotations

import pytest

from satisfactory_api import (
    CallError,
    CallOutcome,
    CallResult,
    CommandResponse,
    Endpoint,
    ErrorKind,
    SatisfactoryResponseError,
    SatisfactoryTimeout,
    ServerStateResponse,
)


def test_endpoint_base_url() -> None:
    assert Endpoint("example.lan").base_url == "https://example.lan:7777/api/v1"


def test_endpoint_is_frozen() -> None:
    endpoint = Endpoint("example.lan")
    with pytest.raises(AttributeError):
        endpoint.port = 1  # type: ignore[misc]


class TestCallResult:
    """Tests for the tagged result type."""

    def test_success_has_no_error(self) -> None:
        result = CallResult.success(42)
        assert result.outcome is CallOutcome.SUCCESS
        assert result.data == 42
        assert result.error is None
        assert result.error_message is None

    def test_failure_carries_no_data(self) -> None:
        result = CallResult.failure(CallError(kind=ErrorKind.HTTP, message="HTTP 500: x"))
        assert result.is_failure
        assert result.data is None
        assert result.error_message == "HTTP 500: x"

    def test_cancelled_is_distinct_from_failure(self) -> None:
        result = CallResult.cancelled()
        assert result.is_cancelled
        assert not result.is_failure
        assert not result.is_success
        assert result.error.kind is ErrorKind.CANCELLED


class TestCallError:
    """Tests for error classification helpers."""

    def test_from_response_error_keeps_status_and_body(self) -> None:
        error = CallError.from_exception(SatisfactoryResponseError(403, "insufficient_scope"))
        assert error.kind is ErrorKind.HTTP
        assert error.status == 403
        assert error.body == "insufficient_scope"
        assert error.message == "HTTP 403: insufficient_scope"
        assert error.insufficient_scope

    def test_from_timeout(self) -> None:
        error = CallError.from_exception(SatisfactoryTimeout("slow"), attempts=3)
        assert error.kind is ErrorKind.TIMEOUT
        assert error.status is None
        assert error.attempts == 3

    def test_unknown_exception_is_unexpected(self) -> None:
        error = CallError.from_exception(KeyError("x"))
        assert error.kind is ErrorKind.UNEXPECTED

    def test_insufficient_scope_in_json_body(self) -> None:
        error = CallError(
            kind=ErrorKind.HTTP,
            message="HTTP 401: ...",
            status=401,
            body='{"errorCode":"insufficient_scope","errorMessage":"..."}',
        )
        assert error.insufficient_scope


class TestResponseShapes:
    """Tests for decoding partially populated replies."""

    def test_missing_game_state_is_none(self) -> None:
        assert ServerStateResponse.from_dict({}).server_game_state is None

    def test_command_response_defaults(self) -> None:
        response = CommandResponse.from_dict({"commandResult": "ok"})
        assert response.command_result == "ok"
        assert response.return_value is False

    def test_non_object_rejected(self) -> None:
        with pytest.raises(ValueError, match="expects a JSON object"):
            CommandResponse.from_dict("text")
