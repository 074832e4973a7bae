"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import RedirectResponse

from recipe_journal.api.auth import router as auth_router
from recipe_journal.api.dependencies import (
    LoginRequired,
    clear_session_cookies,
    refresh_token,
    set_session_cookies,
)
from recipe_journal.api.recipes import router as recipes_router
from recipe_journal.app_logging import configure_logging
from recipe_journal.containers import AppContainer
from recipe_journal.services.recipes import RecipeNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Recipe journal starting",
            extra={"environment": app.state.container.settings.environment},
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(recipes_router)

    @app.exception_handler(LoginRequired)
    async def redirect_to_login(
        request: Request, exc: LoginRequired
    ) -> RedirectResponse:
        session = container.session_gate.refresh(refresh_token(request))
        if session is None:
            response = RedirectResponse(
                "/login", status_code=status.HTTP_303_SEE_OTHER
            )
            clear_session_cookies(response, container.settings)
            return response
        # Replays the original request, form body included, with fresh tokens.
        response = RedirectResponse(
            str(request.url), status_code=status.HTTP_307_TEMPORARY_REDIRECT
        )
        set_session_cookies(response, container.settings, session)
        return response

    @app.exception_handler(RecipeNotFoundError)
    async def redirect_to_list(
        request: Request, exc: RecipeNotFoundError
    ) -> RedirectResponse:
        # Missing and foreign recipes are deliberately indistinguishable.
        logger.info("Recipe not available", extra={"recipe_id": str(exc.recipe_id)})
        return RedirectResponse("/recipes", status_code=status.HTTP_303_SEE_OTHER)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def index() -> RedirectResponse:
        return RedirectResponse("/recipes", status_code=status.HTTP_303_SEE_OTHER)

    return app
