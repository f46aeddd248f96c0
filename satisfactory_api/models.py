"""Data model for the dedicated server API client.

Response shapes mirror the server's wire schema. Field names on the wire are
lower camel case; every ``from_dict`` ignores unknown keys and fills missing
ones with defaults so that a partially populated reply still decodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from .errors import ErrorKind, SatisfactoryClientError

T = TypeVar("T")

DEFAULT_PORT = 7777
API_PATH = "/api/v1"
INSUFFICIENT_SCOPE = "insufficient_scope"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """HTTPS location of the server API."""

    host: str
    port: int = DEFAULT_PORT

    @property
    def base_url(self) -> str:
        """Single URL every function is posted to."""
        return f"https://{self.host}:{self.port}{API_PATH}"


class CallOutcome(Enum):
    """Terminal state of a single call."""

    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class CallError:
    """Human-readable description of why a call did not succeed."""

    kind: ErrorKind
    message: str
    status: int | None = None
    body: str | None = None
    attempts: int = 1

    @property
    def insufficient_scope(self) -> bool:
        """True when the server rejected the credential's privilege level."""
        text = self.body if self.body is not None else self.message
        return INSUFFICIENT_SCOPE in text

    @classmethod
    def from_exception(
        cls, err: BaseException, *, attempts: int = 1, message: str | None = None
    ) -> CallError:
        if isinstance(err, SatisfactoryClientError):
            kind = err.kind
        else:
            kind = ErrorKind.UNEXPECTED
        return cls(
            kind=kind,
            message=message if message is not None else str(err) or type(err).__name__,
            status=getattr(err, "status", None),
            body=getattr(err, "body", None),
            attempts=attempts,
        )


@dataclass(frozen=True, slots=True)
class CallResult(Generic[T]):
    """Tagged result of a call: success with data, failure or cancelled."""

    outcome: CallOutcome
    data: T | None = None
    error: CallError | None = None

    @classmethod
    def success(cls, data: T) -> CallResult[T]:
        return cls(outcome=CallOutcome.SUCCESS, data=data)

    @classmethod
    def failure(cls, error: CallError) -> CallResult[T]:
        return cls(outcome=CallOutcome.FAILURE, error=error)

    @classmethod
    def cancelled(cls, message: str = "Call was cancelled") -> CallResult[T]:
        return cls(
            outcome=CallOutcome.CANCELLED,
            error=CallError(kind=ErrorKind.CANCELLED, message=message),
        )

    @property
    def is_success(self) -> bool:
        return self.outcome is CallOutcome.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.outcome is CallOutcome.FAILURE

    @property
    def is_cancelled(self) -> bool:
        return self.outcome is CallOutcome.CANCELLED

    @property
    def error_message(self) -> str | None:
        return self.error.message if self.error is not None else None


def _require_mapping(data: Any, shape: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{shape} expects a JSON object, got {type(data).__name__}")
    return data


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _str_map(value: Any) -> dict[str, str]:
    if not value:
        return {}
    return {str(key): str(item) for key, item in _require_mapping(value, "map").items()}


@dataclass(frozen=True, slots=True)
class GenericResponse:
    """Untyped success marker for functions whose reply body is not needed."""

    payload: Any = None

    @classmethod
    def from_dict(cls, data: Any) -> GenericResponse | None:
        if data is None:
            return None
        return cls(payload=data)


@dataclass(frozen=True, slots=True)
class HealthCheckResponse:
    health: str | None = None
    server_custom_data: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> HealthCheckResponse:
        data = _require_mapping(data, "HealthCheck")
        return cls(
            health=_optional_str(data.get("health")),
            server_custom_data=_optional_str(data.get("serverCustomData")),
        )


@dataclass(frozen=True, slots=True)
class LoginResponse:
    authentication_token: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> LoginResponse:
        data = _require_mapping(data, "Login")
        return cls(authentication_token=_optional_str(data.get("authenticationToken")))


@dataclass(frozen=True, slots=True)
class ClaimServerResponse:
    authentication_token: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ClaimServerResponse:
        data = _require_mapping(data, "ClaimServer")
        return cls(authentication_token=_optional_str(data.get("authenticationToken")))


@dataclass(frozen=True, slots=True)
class ServerGameState:
    active_session_name: str | None = None
    num_connected_players: int = 0
    player_limit: int = 0
    tech_tier: int = 0
    game_phase: str | None = None
    active_schematic: str | None = None
    is_game_running: bool = False
    is_game_paused: bool = False
    average_tick_rate: float = 0.0
    total_game_duration: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ServerGameState:
        data = _require_mapping(data, "ServerGameState")
        return cls(
            active_session_name=_optional_str(data.get("activeSessionName")),
            num_connected_players=int(data.get("numConnectedPlayers", 0)),
            player_limit=int(data.get("playerLimit", 0)),
            tech_tier=int(data.get("techTier", 0)),
            game_phase=_optional_str(data.get("gamePhase")),
            active_schematic=_optional_str(data.get("activeSchematic")),
            is_game_running=bool(data.get("isGameRunning", False)),
            is_game_paused=bool(data.get("isGamePaused", False)),
            average_tick_rate=float(data.get("averageTickRate", 0.0)),
            total_game_duration=int(data.get("totalGameDuration", 0)),
        )


@dataclass(frozen=True, slots=True)
class ServerStateResponse:
    server_game_state: ServerGameState | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ServerStateResponse:
        data = _require_mapping(data, "QueryServerState")
        state = data.get("serverGameState")
        return cls(
            server_game_state=ServerGameState.from_dict(state) if state is not None else None
        )


@dataclass(frozen=True, slots=True)
class CommandResponse:
    """Reply to RunCommand.

    ``command_result`` is the console text and ``return_value`` the server's
    own success flag; a command can run and still report failure.
    """

    command_result: str | None = None
    return_value: bool = False

    @property
    def succeeded(self) -> bool:
        return self.return_value

    @classmethod
    def from_dict(cls, data: Any) -> CommandResponse:
        data = _require_mapping(data, "RunCommand")
        return cls(
            command_result=_optional_str(data.get("commandResult")),
            return_value=bool(data.get("returnValue", False)),
        )


@dataclass(frozen=True, slots=True)
class SaveHeader:
    save_name: str | None = None
    save_date_time: str | None = None
    play_duration_seconds: int = 0
    is_modded_save: bool = False
    is_edited_save: bool = False
    is_creative_mode_enabled: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> SaveHeader:
        data = _require_mapping(data, "SaveHeader")
        return cls(
            save_name=_optional_str(data.get("saveName")),
            save_date_time=_optional_str(data.get("saveDateTime")),
            play_duration_seconds=int(data.get("playDurationSeconds", 0)),
            is_modded_save=bool(data.get("isModdedSave", False)),
            is_edited_save=bool(data.get("isEditedSave", False)),
            is_creative_mode_enabled=bool(data.get("isCreativeModeEnabled", False)),
        )


@dataclass(frozen=True, slots=True)
class SessionSaveStruct:
    session_name: str | None = None
    save_headers: tuple[SaveHeader, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> SessionSaveStruct:
        data = _require_mapping(data, "SessionSaveStruct")
        return cls(
            session_name=_optional_str(data.get("sessionName")),
            save_headers=tuple(
                SaveHeader.from_dict(header) for header in data.get("saveHeaders") or ()
            ),
        )


@dataclass(frozen=True, slots=True)
class SessionsResponse:
    sessions: tuple[SessionSaveStruct, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> SessionsResponse:
        data = _require_mapping(data, "EnumerateSessions")
        return cls(
            sessions=tuple(
                SessionSaveStruct.from_dict(session) for session in data.get("sessions") or ()
            )
        )


@dataclass(frozen=True, slots=True)
class ServerOptionsResponse:
    server_options: dict[str, str] = field(default_factory=dict)
    pending_server_options: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ServerOptionsResponse:
        data = _require_mapping(data, "GetServerOptions")
        return cls(
            server_options=_str_map(data.get("serverOptions")),
            pending_server_options=_str_map(data.get("pendingServerOptions")),
        )


@dataclass(frozen=True, slots=True)
class AdvancedGameSettingsResponse:
    creative_mode_enabled: bool = False
    advanced_game_settings: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> AdvancedGameSettingsResponse:
        data = _require_mapping(data, "GetAdvancedGameSettings")
        return cls(
            creative_mode_enabled=bool(data.get("creativeModeEnabled", False)),
            advanced_game_settings=_str_map(data.get("advancedGameSettings")),
        )


@dataclass(frozen=True, slots=True)
class ServerNewGameData:
    """Request payload for CreateNewGame. Map and location names are opaque."""

    session_name: str
    map_name: str | None = None
    starting_location: str | None = None
    skip_onboarding: bool = False
    advanced_game_settings: dict[str, str] = field(default_factory=dict)
    custom_options_only_for_modding: dict[str, str] = field(default_factory=dict)

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {
            "sessionName": self.session_name,
            "skipOnboarding": self.skip_onboarding,
            "advancedGameSettings": dict(self.advanced_game_settings),
            "customOptionsOnlyForModding": dict(self.custom_options_only_for_modding),
        }
        if self.map_name is not None:
            wire["mapName"] = self.map_name
        if self.starting_location is not None:
            wire["startingLocation"] = self.starting_location
        return wire
