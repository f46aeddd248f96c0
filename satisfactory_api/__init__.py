"""Async client for the dedicated server HTTPS API."""

__version__ = "0.1.0"

from .auth import ApplicationToken, AuthContext, Credential, SessionToken
from .client import LOGIN_PRIVILEGE_ORDER, PrivilegeLevel, SatisfactoryApiClient
from .config import ClientSettings
from .errors import (
    ConfigurationError,
    ErrorKind,
    SatisfactoryClientError,
    SatisfactoryConnectionError,
    SatisfactoryDecodeError,
    SatisfactoryDisposedError,
    SatisfactoryResponseError,
    SatisfactoryTimeout,
)
from .http import SatisfactoryHttpTransport
from .models import (
    AdvancedGameSettingsResponse,
    CallError,
    CallOutcome,
    CallResult,
    ClaimServerResponse,
    CommandResponse,
    Endpoint,
    GenericResponse,
    HealthCheckResponse,
    LoginResponse,
    SaveHeader,
    ServerGameState,
    ServerNewGameData,
    ServerOptionsResponse,
    ServerStateResponse,
    SessionSaveStruct,
    SessionsResponse,
)
from .protocol import build_envelope, decode_response, encode_request
from .retry import RetryPolicy

__all__ = [
    "LOGIN_PRIVILEGE_ORDER",
    "AdvancedGameSettingsResponse",
    "ApplicationToken",
    "AuthContext",
    "CallError",
    "CallOutcome",
    "CallResult",
    "ClaimServerResponse",
    "ClientSettings",
    "CommandResponse",
    "ConfigurationError",
    "Credential",
    "Endpoint",
    "ErrorKind",
    "GenericResponse",
    "HealthCheckResponse",
    "LoginResponse",
    "PrivilegeLevel",
    "RetryPolicy",
    "SatisfactoryApiClient",
    "SatisfactoryClientError",
    "SatisfactoryConnectionError",
    "SatisfactoryDecodeError",
    "SatisfactoryDisposedError",
    "SatisfactoryHttpTransport",
    "SatisfactoryResponseError",
    "SatisfactoryTimeout",
    "SaveHeader",
    "ServerGameState",
    "ServerNewGameData",
    "ServerOptionsResponse",
    "ServerStateResponse",
    "SessionSaveStruct",
    "SessionToken",
    "SessionsResponse",
    "__version__",
    "build_envelope",
    "decode_response",
    "encode_request",
]
