"""Supabase Auth implementation of the auth gateway."""

from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID

from supabase import AuthApiError, Client

from recipe_journal.domain.auth import AuthSession, AuthUser
from recipe_journal.services.auth import AuthenticationError, AuthGateway


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Resolves and issues sessions through Supabase Auth.

    ``client`` is the shared service client and never carries a user session.
    Sign-in and refresh run on a fresh client from ``sign_in_client_factory``
    so the issued session stays local to that call. Only rejections from the
    auth API become ``AuthenticationError``; transport failures propagate.
    """

    client: Client
    sign_in_client_factory: Callable[[], Client]

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for an access token, if valid."""
        response = self.client.auth.get_user(access_token)
        if response is None or response.user is None:
            return None
        return _parse_user(response.user)

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        client = self.sign_in_client_factory()
        try:
            response = client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthApiError as exc:
            raise AuthenticationError("Invalid email or password") from exc
        return _parse_session(response, "Invalid email or password")

    def refresh(self, refresh_token: str) -> AuthSession:
        """Exchange a refresh token for a new session."""
        client = self.sign_in_client_factory()
        try:
            response = client.auth.refresh_session(refresh_token)
        except AuthApiError as exc:
            raise AuthenticationError("Session can no longer be refreshed") from exc
        return _parse_session(response, "Session can no longer be refreshed")

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""
        self.client.auth.admin.sign_out(access_token)


def _parse_user(user) -> AuthUser:  # type: ignore[no-untyped-def]
    return AuthUser(id=UUID(user.id), email=user.email)


def _parse_session(response, message: str) -> AuthSession:  # type: ignore[no-untyped-def]
    if response.session is None or response.user is None:
        raise AuthenticationError(message)
    return AuthSession(
        access_token=response.session.access_token,
        refresh_token=response.session.refresh_token,
        user=_parse_user(response.user),
    )
