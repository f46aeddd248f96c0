"""Environment-driven settings for building an API client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .auth import AuthContext
from .client import SatisfactoryApiClient
from .errors import ConfigurationError
from .http import DEFAULT_TIMEOUT
from .models import DEFAULT_PORT, Endpoint
from .retry import DEFAULT_BASE_DELAY, DEFAULT_MAX_ATTEMPTS, RetryPolicy

ENV_PREFIX = "SATISFACTORY_"
DEFAULT_HOST = "127.0.0.1"


@dataclass(frozen=True)
class ClientSettings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    application_token: str = ""
    password: str = ""
    timeout_seconds: float = DEFAULT_TIMEOUT
    retry_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay_seconds: float = DEFAULT_BASE_DELAY

    @staticmethod
    def from_env() -> "ClientSettings":
        _load_dotenv_if_present()

        try:
            port = int(_env("PORT", str(DEFAULT_PORT)))
            timeout_seconds = float(_env("TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT)))
            retry_attempts = int(_env("RETRY_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS)))
            retry_delay_seconds = float(
                _env("RETRY_DELAY_SECONDS", str(DEFAULT_BASE_DELAY))
            )
        except ValueError as err:
            raise ConfigurationError(f"Invalid numeric setting: {err}") from err

        settings = ClientSettings(
            host=_env("HOST", DEFAULT_HOST),
            port=port,
            application_token=_env("APPLICATION_TOKEN", ""),
            password=os.getenv(f"{ENV_PREFIX}PASSWORD", ""),
            timeout_seconds=timeout_seconds,
            retry_attempts=retry_attempts,
            retry_delay_seconds=retry_delay_seconds,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if not self.host.strip():
            raise ConfigurationError(f"{ENV_PREFIX}HOST must not be empty")

        if not 0 < self.port <= 65535:
            raise ConfigurationError(f"{ENV_PREFIX}PORT must be between 1 and 65535")

        if self.timeout_seconds <= 0:
            raise ConfigurationError(f"{ENV_PREFIX}TIMEOUT_SECONDS must be greater than 0")

        if self.retry_attempts < 1:
            raise ConfigurationError(f"{ENV_PREFIX}RETRY_ATTEMPTS must be 1 or greater")

        if self.retry_delay_seconds < 0:
            raise ConfigurationError(
                f"{ENV_PREFIX}RETRY_DELAY_SECONDS must be 0 or greater"
            )

    def endpoint(self) -> Endpoint:
        return Endpoint(host=self.host.strip(), port=self.port)

    def auth_context(self) -> AuthContext:
        return AuthContext(application_token=self.application_token or None)

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_attempts,
            base_delay=self.retry_delay_seconds,
        )

    def create_client(self) -> SatisfactoryApiClient:
        return SatisfactoryApiClient(
            self.endpoint(),
            auth=self.auth_context(),
            timeout=self.timeout_seconds,
            retry_policy=self.retry_policy(),
        )


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default).strip()


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    for candidate in _candidate_env_files(file_name):
        _load_env_file(candidate)


def _candidate_env_files(file_name: str) -> list[Path]:
    candidates: list[Path] = []

    explicit = os.getenv(f"{ENV_PREFIX}ENV_FILE", "").strip()
    if explicit:
        candidates.append(Path(explicit).expanduser())

    cwd_env = Path.cwd() / file_name
    if not candidates or candidates[0].resolve() != cwd_env.resolve():
        candidates.append(cwd_env)
    return candidates


def _load_env_file(path: Path) -> None:
    if not path.is_file():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return
