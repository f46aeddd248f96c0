"""HTTPS transport for the dedicated server API endpoint."""

from __future__ import annotations

import logging
from typing import Final

import aiohttp

from .errors import (
    SatisfactoryConnectionError,
    SatisfactoryDisposedError,
    SatisfactoryResponseError,
    SatisfactoryTimeout,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final = 10.0
PREVIEW_LENGTH: Final = 500

_JSON_HEADERS: Final = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class SatisfactoryHttpTransport:
    """Owns the aiohttp session used to reach the server.

    Dedicated servers ship self-signed certificates, so certificate
    verification is always disabled. A session passed in by the caller is
    used as-is and left open on ``close()``; a session created here is closed
    exactly once.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def timeout(self) -> float:
        return self._timeout

    def _get_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise SatisfactoryDisposedError("Client has been disposed")
        if self._session is None:
            self._session = aiohttp.ClientSession(
                connector=aiohttp.TCPConnector(ssl=False),
            )
        return self._session

    async def post(
        self,
        url: str,
        body: bytes,
        headers: dict[str, str] | None = None,
    ) -> bytes:
        """POST a JSON body and return the raw 2xx response body.

        Raises:
            SatisfactoryDisposedError: If the transport was closed
            SatisfactoryResponseError: If the server answers with a non-2xx status
            SatisfactoryTimeout: If the request exceeds the timeout
            SatisfactoryConnectionError: If the network request fails
        """
        session = self._get_session()
        try:
            async with session.post(
                url,
                data=body,
                headers={**_JSON_HEADERS, **(headers or {})},
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                ssl=False,
            ) as resp:
                content = await resp.read()
                _LOGGER.debug(
                    "Response status: %s, content length: %d", resp.status, len(content)
                )
                text = content.decode("utf-8", errors="replace")
                if not 200 <= resp.status < 300:
                    raise SatisfactoryResponseError(resp.status, text)
                _LOGGER.debug("Response preview: %s", text[:PREVIEW_LENGTH])
                return content
        except TimeoutError as err:
            raise SatisfactoryTimeout(
                f"request exceeded {self._timeout:g}s"
            ) from err
        except aiohttp.ClientError as err:
            raise SatisfactoryConnectionError(str(err) or type(err).__name__) from err

    async def close(self) -> None:
        """Release the underlying session. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        session, self._session = self._session, None
        if session is not None and self._owns_session:
            await session.close()
