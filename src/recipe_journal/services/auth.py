"""Session resolution against the auth provider."""

import logging
from dataclasses import dataclass
from typing import Protocol

from recipe_journal.domain.auth import AuthSession, AuthUser

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when the auth provider rejects credentials or a refresh token."""


class AuthGateway(Protocol):
    """Interface for the external auth provider."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the identity behind an access token."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session."""

    def refresh(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""


@dataclass
class SessionGate:
    """Resolves the caller's identity for protected pages."""

    gateway: AuthGateway

    def current_user(self, access_token: str | None) -> AuthUser | None:
        """Return the signed-in user, or None when there is no valid session."""
        if not access_token:
            return None
        try:
            return self.gateway.get_user(access_token)
        except Exception:
            logger.warning("Failed to resolve session", exc_info=True)
            return None

    def refresh(self, refresh_token: str | None) -> AuthSession | None:
        """Renew an expired session, or return None when it cannot be renewed."""
        if not refresh_token:
            return None
        try:
            session = self.gateway.refresh(refresh_token)
        except Exception:
            logger.warning("Failed to refresh session", exc_info=True)
            return None
        logger.info("Session refreshed", extra={"user_id": str(session.user.id)})
        return session

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign a user in with email and password."""
        if not email.strip() or not password:
            raise AuthenticationError("Email and password are required")
        return self.gateway.sign_in(email.strip(), password)

    def sign_out(self, access_token: str | None) -> None:
        """End the session at the provider, if there is one."""
        if not access_token:
            return
        try:
            self.gateway.sign_out(access_token)
        except Exception:
            logger.warning("Failed to revoke session", exc_info=True)
