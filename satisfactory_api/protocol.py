"""Envelope helpers for the dedicated server's function-style JSON API.

Every request is ``{"function": <Name>, "data": {...}}`` posted to a single
URL. Replies are usually ``{"data": {...}}`` but some functions answer with a
bare body or with no content at all.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from .errors import ErrorKind
from .models import CallError, CallResult

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DATA_KEY = "data"

_DECODE_ERRORS = (
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
    ArithmeticError,
    RecursionError,
)


def build_envelope(function: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Build the request envelope for a server function.

    Args:
        function: Case-sensitive server function name (e.g. "HealthCheck").
        data: Payload with wire (lower camel case) keys. Defaults to ``{}``.

    Returns:
        Envelope dict ready to be serialized.
    """
    if not function:
        raise ValueError("function name is required")
    return {"function": function, DATA_KEY: data if data is not None else {}}


def encode_request(function: str, data: dict[str, Any] | None = None) -> bytes:
    """Serialize the request envelope as compact UTF-8 JSON."""
    return json.dumps(
        build_envelope(function, data),
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def _decode_failure(reason: str) -> CallResult[Any]:
    return CallResult.failure(
        CallError(kind=ErrorKind.DECODE, message=f"Failed to parse response: {reason}")
    )


def decode_response(body: bytes | str, parser: Callable[[Any], T | None]) -> CallResult[T]:
    """Unwrap a 2xx response body into a typed result.

    An empty body is handed to ``parser`` as ``{}`` so that no-content
    replies decode as success. If the body is an object with a ``data`` key
    only that sub-tree is parsed, otherwise the whole body is. A parser that
    returns ``None`` or raises a structural error yields a DECODE failure.
    """
    if isinstance(body, bytes):
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as err:
            return _decode_failure(str(err))
    else:
        text = body

    if not text.strip():
        payload: Any = {}
    else:
        try:
            document = json.loads(text)
        except (ValueError, RecursionError) as err:
            _LOGGER.error("Response is not valid JSON: %s", err)
            return _decode_failure(str(err))

        if isinstance(document, dict) and DATA_KEY in document:
            payload = document[DATA_KEY]
        else:
            _LOGGER.debug("No 'data' property found, decoding entire response")
            payload = document

    try:
        result = parser(payload)
    except _DECODE_ERRORS as err:
        _LOGGER.error("Response did not match expected shape: %s", err)
        return _decode_failure(str(err))

    if result is None:
        return _decode_failure("response contained no value")
    return CallResult.success(result)
