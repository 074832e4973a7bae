"""Request dependencies shared by the page routers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Request, Response

from recipe_journal.domain.auth import AuthSession, AuthUser  # noqa: TC001

if TYPE_CHECKING:
    from recipe_journal.config import Settings
    from recipe_journal.containers import AppContainer


class LoginRequired(Exception):
    """Raised when a protected page is requested without a session."""


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def session_token(request: Request) -> str | None:
    """Return the access token stored in the session cookie."""
    container = get_container(request)
    return request.cookies.get(container.settings.session_cookie_name)


def refresh_token(request: Request) -> str | None:
    """Return the refresh token stored alongside the session cookie."""
    container = get_container(request)
    return request.cookies.get(container.settings.session_refresh_cookie_name)


def set_session_cookies(
    response: Response, settings: Settings, session: AuthSession
) -> None:
    """Store both session tokens in HttpOnly cookies."""
    for name, value in (
        (settings.session_cookie_name, session.access_token),
        (settings.session_refresh_cookie_name, session.refresh_token),
    ):
        response.set_cookie(
            name,
            value,
            max_age=settings.session_cookie_max_age,
            httponly=True,
            secure=settings.session_cookie_secure,
            samesite="lax",
        )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    response.delete_cookie(settings.session_cookie_name)
    response.delete_cookie(settings.session_refresh_cookie_name)


async def require_user(request: Request) -> AuthUser:
    """Resolve the signed-in user or send the caller to the login page."""
    container = get_container(request)
    user = container.session_gate.current_user(session_token(request))
    if user is None:
        raise LoginRequired
    return user
