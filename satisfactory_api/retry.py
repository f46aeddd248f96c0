"""Bounded retry with linear backoff for transient transport failures."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TypeVar

from .errors import ErrorKind, SatisfactoryClientError
from .models import CallError, CallResult

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 1.0

_CAUSE_LABELS = {
    ErrorKind.TIMEOUT: "Connection timeout",
    ErrorKind.TRANSPORT: "Network error",
}


@dataclass(frozen=True)
class RetryPolicy:
    """Retry a single logical call on timeouts and connection failures.

    HTTP error statuses, decode failures and unexpected exceptions are
    returned on first occurrence. The delay before attempt ``k`` (k >= 2) is
    ``base_delay * (k - 1)`` seconds.
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    base_delay: float = DEFAULT_BASE_DELAY
    sleep: Callable[[float], Awaitable[None]] = field(
        default=asyncio.sleep, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must not be negative")

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before the given 1-based attempt."""
        return self.base_delay * (attempt - 1) if attempt > 1 else 0.0

    async def execute(
        self,
        attempt_fn: Callable[[], Awaitable[CallResult[T]]],
        *,
        description: str = "request",
    ) -> CallResult[T]:
        """Run ``attempt_fn`` until it returns or a non-retryable error occurs.

        ``asyncio.CancelledError`` is not caught; the caller decides how a
        cancelled call is reported.
        """
        attempt = 1
        while True:
            try:
                return await attempt_fn()
            except SatisfactoryClientError as err:
                if not err.retryable:
                    _LOGGER.error("%s failed: %s", description, err)
                    return CallResult.failure(CallError.from_exception(err, attempts=attempt))
                _LOGGER.warning(
                    "%s failed (attempt %d/%d): %s",
                    description,
                    attempt,
                    self.max_attempts,
                    err,
                )
                if attempt >= self.max_attempts:
                    return self._exhausted(err, description)
            except Exception as err:
                _LOGGER.exception("Unexpected error for %s", description)
                return CallResult.failure(
                    CallError.from_exception(
                        err, attempts=attempt, message=f"Connection error: {err}"
                    )
                )
            attempt += 1
            await self.sleep(self.delay_before(attempt))

    def _exhausted(self, last_error: SatisfactoryClientError, description: str) -> CallResult[T]:
        label = _CAUSE_LABELS.get(last_error.kind, "Request failed")
        _LOGGER.error(
            "%s failed after %d attempts: %s", description, self.max_attempts, last_error
        )
        return CallResult.failure(
            CallError(
                kind=last_error.kind,
                message=f"{label} after {self.max_attempts} attempts: {last_error}",
                attempts=self.max_attempts,
            )
        )
