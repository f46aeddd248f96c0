"""Credential handling for the dedicated server API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class SessionToken:
    """Token returned by PasswordLogin / PasswordlessLogin."""

    value: str


@dataclass(frozen=True, slots=True)
class ApplicationToken:
    """Long-lived token generated on the server console."""

    value: str


Credential: TypeAlias = SessionToken | ApplicationToken | None


class AuthContext:
    """Holds the current credentials and picks the Authorization header.

    An application token always wins over a session token. The header is
    recomputed on every call since a login may complete between calls.
    """

    def __init__(
        self,
        *,
        application_token: str | None = None,
        session_token: str | None = None,
    ) -> None:
        self.application_token = application_token
        self.session_token = session_token

    @property
    def credential(self) -> Credential:
        """Effective credential for the next request."""
        if self.application_token:
            return ApplicationToken(self.application_token)
        if self.session_token:
            return SessionToken(self.session_token)
        return None

    @property
    def has_application_token(self) -> bool:
        return bool(self.application_token)

    def authorization_header(self) -> str | None:
        credential = self.credential
        if credential is None:
            return None
        return f"Bearer {credential.value}"

    def headers(self) -> dict[str, str]:
        header = self.authorization_header()
        if header is None:
            return {}
        return {"Authorization": header}

    def set_credential(self, credential: Credential) -> None:
        """Store a tagged credential in its slot."""
        if isinstance(credential, ApplicationToken):
            self.application_token = credential.value
        elif isinstance(credential, SessionToken):
            self.session_token = credential.value
        else:
            self.clear(include_application=True)

    def clear(self, *, include_application: bool = False) -> None:
        """Drop the session token (disconnect), optionally the application token too."""
        self.session_token = None
        if include_application:
            self.application_token = None

    def describe(self) -> str:
        """Auth mode for log lines; never includes the token."""
        credential = self.credential
        if isinstance(credential, ApplicationToken):
            return "application token"
        if isinstance(credential, SessionToken):
            return "session token"
        return "no token"
