"""Login and logout pages."""

import logging

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from recipe_journal.api.dependencies import (
    clear_session_cookies,
    get_container,
    session_token,
    set_session_cookies,
)
from recipe_journal.api.templating import templates
from recipe_journal.services.auth import AuthenticationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password."
SIGN_IN_UNAVAILABLE_MESSAGE = "Sign-in is unavailable right now. Please try again."


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request) -> Response:
    """Render the sign-in form, skipping it for signed-in users."""
    container = get_container(request)
    if container.session_gate.current_user(session_token(request)):
        return RedirectResponse("/recipes", status_code=status.HTTP_303_SEE_OTHER)
    return templates.TemplateResponse(request, "login.html", {"email": ""})


@router.post("/login", response_class=HTMLResponse)
async def login(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
) -> Response:
    """Sign in and store the session tokens in cookies."""
    container = get_container(request)
    try:
        session = container.session_gate.sign_in(email, password)
    except AuthenticationError:
        logger.info("Sign-in rejected")
        return _render_login(
            request, email, INVALID_CREDENTIALS_MESSAGE, status.HTTP_401_UNAUTHORIZED
        )
    except Exception:
        logger.exception("Sign-in failed")
        return _render_login(
            request,
            email,
            SIGN_IN_UNAVAILABLE_MESSAGE,
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    response = RedirectResponse("/recipes", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookies(response, container.settings, session)
    return response


@router.post("/logout")
async def logout(request: Request) -> Response:
    """End the session and clear the cookies."""
    container = get_container(request)
    container.session_gate.sign_out(session_token(request))
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    clear_session_cookies(response, container.settings)
    return response


def _render_login(
    request: Request, email: str, error: str, status_code: int
) -> Response:
    return templates.TemplateResponse(
        request,
        "login.html",
        {"email": email, "error": error},
        status_code=status_code,
    )
