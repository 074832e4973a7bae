"""Domain models for authenticated sessions."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """Identity resolved from an access token."""

    id: UUID
    email: str | None


@dataclass(frozen=True)
class AuthSession:
    """Session issued by the auth provider after sign-in."""

    access_token: str
    refresh_token: str
    user: AuthUser
