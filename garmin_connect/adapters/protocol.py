"""Collaborator protocols for the session-aware request layer.

The session context depends only on these interfaces, never on concrete
adapters, so tests can substitute in-memory transports and logins.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, SecretStr


class Credentials(BaseModel):
    username: str
    password: SecretStr


@dataclass(frozen=True, eq=False)
class Session:
    """Authenticated handle produced by a login collaborator.

    Compared by identity: two logins never yield "the same" session.
    """

    access_token: str
    token_type: str = "Bearer"
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) >= self.expires_at

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"


@dataclass(frozen=True)
class TransportResponse:
    status: int
    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@runtime_checkable
class Transport(Protocol):
    """Raw HTTP GET with the session's auth context attached."""

    async def get(
        self,
        path: str,
        params: Mapping[str, str] | None,
        session: Session,
    ) -> TransportResponse:
        """Issue a GET for *path* relative to the service base URL.

        Returns the response whatever its status; raises TransportError only
        when no response could be obtained.
        """
        ...

    async def aclose(self) -> None: ...


@runtime_checkable
class LoginCollaborator(Protocol):
    async def login(self, credentials: Credentials) -> Session:
        """Exchange credentials for a fresh session.

        Raises AuthenticationError on bad credentials, an unreachable service,
        or an unexpected response shape.
        """
        ...
