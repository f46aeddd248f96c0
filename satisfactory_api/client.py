"""High-level client for the dedicated server HTTPS API.

Every server function is a POST of ``{"function": ..., "data": ...}`` to one
URL. This module wires the transport, credentials, envelope codec and retry
policy together and exposes one coroutine per server function.

No exception escapes a call under normal operation: timeouts, connection
failures, HTTP errors, decode errors, cancellation and use after ``close()``
all come back as a ``CallResult``.

Usage:
    async with SatisfactoryApiClient(Endpoint("192.168.1.10")) as client:
        health = await client.health_check()
        login = await client.login(password="secret")
        state = await client.query_server_state()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping
from enum import Enum
from typing import Any, TypeVar

import aiohttp

from .auth import AuthContext, Credential
from .errors import ErrorKind, SatisfactoryDecodeError
from .http import DEFAULT_TIMEOUT, SatisfactoryHttpTransport
from .models import (
    AdvancedGameSettingsResponse,
    CallError,
    CallResult,
    ClaimServerResponse,
    CommandResponse,
    Endpoint,
    GenericResponse,
    HealthCheckResponse,
    LoginResponse,
    ServerNewGameData,
    ServerOptionsResponse,
    ServerStateResponse,
    SessionsResponse,
)
from .protocol import decode_response, encode_request
from .retry import RetryPolicy

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class PrivilegeLevel(Enum):
    """Minimum privilege level requested at login."""

    ADMINISTRATOR = "Administrator"
    CLIENT = "Client"


# Tried in order by login(); the highest privilege the server grants wins.
LOGIN_PRIVILEGE_ORDER: tuple[PrivilegeLevel, ...] = (
    PrivilegeLevel.ADMINISTRATOR,
    PrivilegeLevel.CLIENT,
)


def _privilege_value(privilege: PrivilegeLevel | str) -> str:
    return privilege.value if isinstance(privilege, PrivilegeLevel) else privilege


def _accept_any(_payload: Any) -> bool:
    return True


class SatisfactoryApiClient:
    """Client for one dedicated server."""

    def __init__(
        self,
        endpoint: Endpoint,
        *,
        auth: AuthContext | None = None,
        session: aiohttp.ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Initialize client.

        Args:
            endpoint: Server host and port
            auth: Credentials; an empty context is created when omitted
            session: Optional caller-owned aiohttp session
            timeout: Per-attempt request timeout (seconds)
            retry_policy: Retry settings for transient failures
        """
        self._endpoint = endpoint
        self._auth = auth if auth is not None else AuthContext()
        self._transport = SatisfactoryHttpTransport(session, timeout=timeout)
        self._retry_policy = retry_policy if retry_policy is not None else RetryPolicy()

    async def __aenter__(self) -> SatisfactoryApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Collaborator interface
    # -------------------------------------------------------------------------

    @property
    def endpoint(self) -> Endpoint:
        return self._endpoint

    @endpoint.setter
    def endpoint(self, endpoint: Endpoint) -> None:
        self._endpoint = endpoint

    @property
    def auth(self) -> AuthContext:
        return self._auth

    @property
    def credential(self) -> Credential:
        """Credential that will authorize the next request."""
        return self._auth.credential

    @credential.setter
    def credential(self, credential: Credential) -> None:
        self._auth.set_credential(credential)

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def is_closed(self) -> bool:
        return self._transport.closed

    async def close(self) -> None:
        """Release the transport. Later calls fail with a DISPOSED error."""
        if self._transport.closed:
            return
        _LOGGER.info("Closing API client for %s", self._endpoint.base_url)
        await self._transport.close()

    # -------------------------------------------------------------------------
    # Generic entry point
    # -------------------------------------------------------------------------

    async def call(
        self,
        function: str,
        data: Mapping[str, Any] | None = None,
        *,
        parser: Callable[[Any], T | None] = GenericResponse.from_dict,  # type: ignore[assignment]
        cancel: asyncio.Event | None = None,
    ) -> CallResult[T]:
        """Call a server function and decode its reply with ``parser``.

        Args:
            function: Case-sensitive server function name
            data: Payload with wire (lower camel case) keys
            parser: Turns the unwrapped ``data`` sub-tree into the result type
            cancel: Event that aborts the call (including backoff sleeps)

        Returns:
            Success with the parsed value, Failure with a CallError, or
            Cancelled when ``cancel`` fires first.
        """
        if self._transport.closed:
            _LOGGER.debug("Rejecting %s: client has been disposed", function)
            return CallResult.failure(
                CallError(kind=ErrorKind.DISPOSED, message="Client has been disposed")
            )
        if cancel is not None and cancel.is_set():
            return CallResult.cancelled(f"{function} was cancelled")

        try:
            body = encode_request(function, dict(data) if data is not None else None)
        except (TypeError, ValueError) as err:
            _LOGGER.error("Failed to encode %s request: %s", function, err)
            return CallResult.failure(
                CallError(
                    kind=ErrorKind.UNEXPECTED,
                    message=f"Failed to encode request: {err}",
                )
            )

        async def attempt() -> CallResult[T]:
            url = self._endpoint.base_url
            _LOGGER.debug(
                "Making request to %s, function: %s (%s)",
                url,
                function,
                self._auth.describe(),
            )
            content = await self._transport.post(url, body, self._auth.headers())
            return decode_response(content, parser)

        run = self._retry_policy.execute(attempt, description=function)
        if cancel is None:
            return await run
        return await self._run_cancellable(function, run, cancel)

    async def _run_cancellable(
        self,
        function: str,
        run: Coroutine[Any, Any, CallResult[T]],
        cancel: asyncio.Event,
    ) -> CallResult[T]:
        call_task: asyncio.Task[CallResult[T]] = asyncio.create_task(run)
        cancel_task = asyncio.create_task(cancel.wait())
        try:
            await asyncio.wait(
                {call_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            cancel_task.cancel()
            if not call_task.done():
                call_task.cancel()
                try:
                    await call_task
                except asyncio.CancelledError:
                    pass

        if call_task.cancelled():
            _LOGGER.info("%s cancelled by caller", function)
            return CallResult.cancelled(f"{function} was cancelled")
        return call_task.result()

    # -------------------------------------------------------------------------
    # Health and authentication
    # -------------------------------------------------------------------------

    async def health_check(
        self, client_custom_data: str = "", *, cancel: asyncio.Event | None = None
    ) -> CallResult[HealthCheckResponse]:
        return await self.call(
            "HealthCheck",
            {"clientCustomData": client_custom_data},
            parser=HealthCheckResponse.from_dict,
            cancel=cancel,
        )

    async def passwordless_login(
        self,
        privilege: PrivilegeLevel | str = PrivilegeLevel.CLIENT,
        *,
        cancel: asyncio.Event | None = None,
    ) -> CallResult[LoginResponse]:
        return await self.call(
            "PasswordlessLogin",
            {"minimumPrivilegeLevel": _privilege_value(privilege)},
            parser=LoginResponse.from_dict,
            cancel=cancel,
        )

    async def password_login(
        self,
        password: str,
        privilege: PrivilegeLevel | str = PrivilegeLevel.CLIENT,
        *,
        cancel: asyncio.Event | None = None,
    ) -> CallResult[LoginResponse]:
        return await self.call(
            "PasswordLogin",
            {"password": password, "minimumPrivilegeLevel": _privilege_value(privilege)},
            parser=LoginResponse.from_dict,
            cancel=cancel,
        )

    async def login(
        self, password: str | None = None, *, cancel: asyncio.Event | None = None
    ) -> CallResult[LoginResponse | None]:
        """Obtain a session token, preferring Administrator privilege.

        Skipped when an application token is configured: that token is
        authoritative and the result is a success carrying ``None``. Otherwise
        an Administrator login is attempted first with a fallback to Client.
        The returned token becomes the session token.
        """
        if self._auth.has_application_token:
            _LOGGER.info("Application token configured, skipping login")
            return CallResult.success(None)

        previous = LOGIN_PRIVILEGE_ORDER[0]
        result = await self._login_as(previous, password, cancel)
        for privilege in LOGIN_PRIVILEGE_ORDER[1:]:
            if not result.is_failure:
                break
            _LOGGER.info(
                "%s login failed, trying %s: %s",
                previous.value,
                privilege.value,
                result.error_message,
            )
            previous = privilege
            result = await self._login_as(privilege, password, cancel)

        if not result.is_success:
            return CallResult(outcome=result.outcome, error=result.error)

        token = result.data.authentication_token if result.data is not None else None
        if not token:
            return CallResult.failure(
                CallError.from_exception(
                    SatisfactoryDecodeError(
                        "Login response did not contain an authentication token"
                    )
                )
            )

        self._auth.session_token = token
        _LOGGER.info("Successfully logged in to %s", self._endpoint.base_url)
        return CallResult.success(result.data)

    async def _login_as(
        self,
        privilege: PrivilegeLevel,
        password: str | None,
        cancel: asyncio.Event | None,
    ) -> CallResult[LoginResponse]:
        if password:
            return await self.password_login(password, privilege, cancel=cancel)
        return await self.passwordless_login(privilege, cancel=cancel)

    async def connect(
        self, password: str | None = None, *, cancel: asyncio.Event | None = None
    ) -> CallResult[HealthCheckResponse]:
        """Health check the server, then log in.

        Returns the health check result, or the login result when the server
        is reachable but login fails.
        """
        health = await self.health_check(cancel=cancel)
        if not health.is_success:
            return health
        _LOGGER.info(
            "Connected to %s, server health: %s", self._endpoint.base_url, health.data.health
        )

        login = await self.login(password, cancel=cancel)
        if not login.is_success:
            return CallResult(outcome=login.outcome, error=login.error)
        return health

    def disconnect(self) -> None:
        """Forget the session token. The application token is kept."""
        self._auth.clear()

    async def verify_authentication_token(
        self, *, cancel: asyncio.Event | None = None
    ) -> CallResult[bool]:
        """Check the current credential.

        The server answers with no content when the token is valid, so any
        successful reply means valid.
        """
        return await self.call(
            "VerifyAuthenticationToken", parser=_accept_any, cancel=cancel
        )

    # -------------------------------------------------------------------------
    # Server state and console
    # -------------------------------------------------------------------------

    async def query_server_state(
        self, client_custom_data: str = "", *, cancel: asyncio.Event | None = None
    ) -> CallResult[ServerStateResponse]:
        return await self.call(
            "QueryServerState",
            {"clientCustomData": client_custom_data},
            parser=ServerStateResponse.from_dict,
            cancel=cancel,
        )

    async def run_command(
        self, command: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[CommandResponse]:
        """Run a console command.

        Check ``data.return_value`` as well as the call outcome: the server
        reports logical failure of a command that ran in the reply body.
        """
        return await self.call(
            "RunCommand",
            {"command": command},
            parser=CommandResponse.from_dict,
            cancel=cancel,
        )

    async def shutdown(
        self, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call("Shutdown", cancel=cancel)

    # -------------------------------------------------------------------------
    # Sessions and saves
    # -------------------------------------------------------------------------

    async def save_game(
        self, save_name: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call("SaveGame", {"saveName": save_name}, cancel=cancel)

    async def load_game(
        self,
        save_name: str,
        enable_advanced_game_settings: bool = False,
        *,
        cancel: asyncio.Event | None = None,
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "LoadGame",
            {
                "saveName": save_name,
                "enableAdvancedGameSettings": enable_advanced_game_settings,
            },
            cancel=cancel,
        )

    async def enumerate_sessions(
        self, *, cancel: asyncio.Event | None = None
    ) -> CallResult[SessionsResponse]:
        return await self.call(
            "EnumerateSessions", parser=SessionsResponse.from_dict, cancel=cancel
        )

    async def delete_save_file(
        self, save_name: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call("DeleteSaveFile", {"saveName": save_name}, cancel=cancel)

    async def delete_save_session(
        self, session_name: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "DeleteSaveSession", {"sessionName": session_name}, cancel=cancel
        )

    async def upload_save_game(
        self,
        save_name: str,
        load_save_game: bool = False,
        enable_advanced_game_settings: bool = False,
        *,
        cancel: asyncio.Event | None = None,
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "UploadSaveGame",
            {
                "saveName": save_name,
                "loadSaveGame": load_save_game,
                "enableAdvancedGameSettings": enable_advanced_game_settings,
            },
            cancel=cancel,
        )

    async def download_save_game(
        self, save_name: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call("DownloadSaveGame", {"saveName": save_name}, cancel=cancel)

    async def create_new_game(
        self, new_game_data: ServerNewGameData, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "CreateNewGame", {"newGameData": new_game_data.to_wire()}, cancel=cancel
        )

    # -------------------------------------------------------------------------
    # Server administration
    # -------------------------------------------------------------------------

    async def get_server_options(
        self, *, cancel: asyncio.Event | None = None
    ) -> CallResult[ServerOptionsResponse]:
        return await self.call(
            "GetServerOptions", parser=ServerOptionsResponse.from_dict, cancel=cancel
        )

    async def apply_server_options(
        self, options: Mapping[str, str], *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "ApplyServerOptions", {"updatedServerOptions": dict(options)}, cancel=cancel
        )

    async def get_advanced_game_settings(
        self, *, cancel: asyncio.Event | None = None
    ) -> CallResult[AdvancedGameSettingsResponse]:
        return await self.call(
            "GetAdvancedGameSettings",
            parser=AdvancedGameSettingsResponse.from_dict,
            cancel=cancel,
        )

    async def apply_advanced_game_settings(
        self, settings: Mapping[str, str], *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "ApplyAdvancedGameSettings",
            {"appliedAdvancedGameSettings": dict(settings)},
            cancel=cancel,
        )

    async def claim_server(
        self,
        server_name: str,
        admin_password: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> CallResult[ClaimServerResponse]:
        return await self.call(
            "ClaimServer",
            {"serverName": server_name, "adminPassword": admin_password},
            parser=ClaimServerResponse.from_dict,
            cancel=cancel,
        )

    async def rename_server(
        self, server_name: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call("RenameServer", {"serverName": server_name}, cancel=cancel)

    async def set_client_password(
        self, password: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call("SetClientPassword", {"password": password}, cancel=cancel)

    async def set_admin_password(
        self,
        password: str,
        authentication_token: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "SetAdminPassword",
            {"password": password, "authenticationToken": authentication_token},
            cancel=cancel,
        )

    async def set_auto_load_session_name(
        self, session_name: str, *, cancel: asyncio.Event | None = None
    ) -> CallResult[GenericResponse]:
        return await self.call(
            "SetAutoLoadSessionName", {"sessionName": session_name}, cancel=cancel
        )
