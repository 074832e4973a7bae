"""Recipe pages: list, create, edit, detail, favorite and delete."""

import logging
from urllib.parse import urlencode
from uuid import UUID

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from starlette.datastructures import FormData

from recipe_journal.api.dependencies import get_container, require_user
from recipe_journal.api.forms import (
    ADD_INGREDIENT,
    REMOVE_INGREDIENT,
    draft_from_form,
    parse_form_action,
)
from recipe_journal.api.templating import templates
from recipe_journal.config import Settings
from recipe_journal.domain.auth import AuthUser
from recipe_journal.services.recipe_editor import (
    PartialSaveError,
    RecipeDraft,
    RecipeSaveError,
    RecipeValidationError,
)
from recipe_journal.services.recipe_list import RecipeFilter, RecipeListView
from recipe_journal.services.recipes import RecipeNotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recipes", tags=["recipes"])

SAVE_FAILED_MESSAGE = "Failed to save recipe"
PARTIAL_SAVE_MESSAGE = (
    "Your recipe was saved without its ingredients. "
    "Add them again and save to finish."
)
LOAD_RECIPE_FAILED_MESSAGE = "Couldn't load that recipe. Please try again."
FAVORITE_FAILED_MESSAGE = "Couldn't update favorites. Please try again."
DELETE_FAILED_MESSAGE = "Couldn't delete that recipe. Please try again."

FAVORITE_ERROR = "favorite"
DELETE_ERROR = "delete"
ERROR_MESSAGES = {
    FAVORITE_ERROR: FAVORITE_FAILED_MESSAGE,
    DELETE_ERROR: DELETE_FAILED_MESSAGE,
}


@router.get("", response_class=HTMLResponse)
async def recipe_list(  # noqa: PLR0913
    request: Request,
    q: str | None = None,
    meal_kind: str | None = None,
    favorites: str | None = None,
    error: str | None = None,
    user: AuthUser = Depends(require_user),
) -> Response:
    """Render the user's recipes with the requested filters applied."""
    container = get_container(request)
    view = container.recipe_list_service.load(user.id)
    recipe_filter = RecipeFilter.from_params(q, meal_kind, favorites)
    return _render_list(
        request, user, view, recipe_filter, action_error=ERROR_MESSAGES.get(error)
    )


@router.post("")
async def recipe_list_action(  # noqa: PLR0913
    request: Request,
    recipe_id: str = Form(...),
    action: str = Form(...),
    confirm: str = Form(""),
    q: str = Form(""),
    meal_kind: str = Form("all"),
    favorites: str = Form(""),
    user: AuthUser = Depends(require_user),
) -> Response:
    """Apply a list-level mutation and redirect back to the filtered list."""
    container = get_container(request)
    service = container.recipe_list_service
    recipe_filter = RecipeFilter.from_params(q, meal_kind, favorites)
    parsed_id = _parse_recipe_id(recipe_id)
    error = None
    if action == "toggle_favorite":
        try:
            service.toggle_favorite(user.id, parsed_id)
        except RecipeNotFoundError:
            raise
        except Exception:
            logger.exception(
                "Failed to toggle favorite from list",
                extra={"recipe_id": recipe_id},
            )
            error = FAVORITE_ERROR
    elif action == "delete" and confirm == "yes":
        try:
            service.delete_recipe(user.id, parsed_id)
        except Exception:
            logger.exception(
                "Failed to delete recipe from list",
                extra={"recipe_id": recipe_id},
            )
            error = DELETE_ERROR
    return RedirectResponse(
        f"/recipes?{_filter_query(recipe_filter, error)}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/new", response_class=HTMLResponse)
async def new_recipe_page(
    request: Request, user: AuthUser = Depends(require_user)
) -> Response:
    """Render an empty recipe form."""
    return _render_form(request, user, RecipeDraft(), recipe_id=None)


@router.post("/new", response_class=HTMLResponse)
async def create_recipe(
    request: Request, user: AuthUser = Depends(require_user)
) -> Response:
    """Handle the create form: edit the draft or save it."""
    form = await request.form()
    return _handle_recipe_form(request, user, draft_from_form(form), form, None)


@router.get("/{recipe_id}", response_class=HTMLResponse)
async def recipe_detail(
    request: Request,
    recipe_id: str,
    error: str | None = None,
    user: AuthUser = Depends(require_user),
) -> Response:
    """Render a single recipe."""
    container = get_container(request)
    parsed_id = _parse_recipe_id(recipe_id)
    try:
        detail = container.recipe_detail_service.load(user.id, parsed_id)
    except Exception:
        logger.exception("Failed to load recipe", extra={"recipe_id": recipe_id})
        return _render_error(request, user, LOAD_RECIPE_FAILED_MESSAGE)
    if detail is None:
        raise RecipeNotFoundError(parsed_id)
    return templates.TemplateResponse(
        request,
        "recipe_detail.html",
        {"user": user, "detail": detail, "error": ERROR_MESSAGES.get(error)},
    )


@router.get("/{recipe_id}/edit", response_class=HTMLResponse)
async def edit_recipe_page(
    request: Request, recipe_id: str, user: AuthUser = Depends(require_user)
) -> Response:
    """Render the form pre-filled with an owned recipe."""
    container = get_container(request)
    parsed_id = _parse_recipe_id(recipe_id)
    try:
        draft = container.recipe_editor_service.load_draft(user.id, parsed_id)
    except Exception:
        logger.exception(
            "Failed to load recipe for editing", extra={"recipe_id": recipe_id}
        )
        return _render_error(request, user, LOAD_RECIPE_FAILED_MESSAGE)
    if draft is None:
        raise RecipeNotFoundError(parsed_id)
    return _render_form(request, user, draft, recipe_id=parsed_id)


@router.post("/{recipe_id}/edit", response_class=HTMLResponse)
async def update_recipe(
    request: Request, recipe_id: str, user: AuthUser = Depends(require_user)
) -> Response:
    """Handle the edit form: edit the draft or save it."""
    parsed_id = _parse_recipe_id(recipe_id)
    form = await request.form()
    return _handle_recipe_form(request, user, draft_from_form(form), form, parsed_id)


@router.post("/{recipe_id}/favorite")
async def toggle_favorite(
    request: Request,
    recipe_id: str,
    current: str = Form("0"),
    user: AuthUser = Depends(require_user),
) -> Response:
    """Toggle the favorite flag from the detail page."""
    container = get_container(request)
    parsed_id = _parse_recipe_id(recipe_id)
    result = container.recipe_detail_service.toggle_favorite(
        user.id, parsed_id, currently_favorite=current == "1"
    )
    url = f"/recipes/{parsed_id}"
    if result.failed:
        url = f"{url}?{urlencode({'error': FAVORITE_ERROR})}"
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{recipe_id}/delete", response_class=HTMLResponse)
async def confirm_delete_page(
    request: Request,
    recipe_id: str,
    origin: str = Query("detail", alias="next"),
    user: AuthUser = Depends(require_user),
) -> Response:
    """Ask the user to confirm a deletion."""
    container = get_container(request)
    parsed_id = _parse_recipe_id(recipe_id)
    try:
        detail = container.recipe_detail_service.load(user.id, parsed_id)
    except Exception:
        logger.exception("Failed to load recipe", extra={"recipe_id": recipe_id})
        return _render_error(request, user, LOAD_RECIPE_FAILED_MESSAGE)
    if detail is None:
        raise RecipeNotFoundError(parsed_id)
    return templates.TemplateResponse(
        request,
        "confirm_delete.html",
        {"user": user, "detail": detail, "from_list": origin == "list"},
    )


@router.post("/{recipe_id}/delete")
async def delete_recipe(
    request: Request,
    recipe_id: str,
    confirm: str = Form(""),
    user: AuthUser = Depends(require_user),
) -> Response:
    """Delete a recipe after confirmation and return to the list."""
    container = get_container(request)
    parsed_id = _parse_recipe_id(recipe_id)
    detail_url = f"/recipes/{parsed_id}"
    try:
        deleted = container.recipe_detail_service.delete_recipe(
            user.id, parsed_id, confirmed=confirm == "yes"
        )
    except RecipeNotFoundError:
        raise
    except Exception:
        logger.exception("Failed to delete recipe", extra={"recipe_id": recipe_id})
        return RedirectResponse(
            f"{detail_url}?{urlencode({'error': DELETE_ERROR})}",
            status_code=status.HTTP_303_SEE_OTHER,
        )
    if not deleted:
        return RedirectResponse(detail_url, status_code=status.HTTP_303_SEE_OTHER)
    return RedirectResponse("/recipes", status_code=status.HTTP_303_SEE_OTHER)


def _parse_recipe_id(raw: str) -> UUID:
    """Parse a recipe id from the URL; malformed ids are treated as missing."""
    try:
        return UUID(raw)
    except ValueError as exc:
        raise RecipeNotFoundError(raw) from exc


def _handle_recipe_form(
    request: Request,
    user: AuthUser,
    draft: RecipeDraft,
    form: FormData,
    recipe_id: UUID | None,
) -> Response:
    action, index = parse_form_action(form.get("action"))
    if action == ADD_INGREDIENT:
        return _render_form(request, user, draft.add_ingredient(), recipe_id)
    if action == REMOVE_INGREDIENT and index is not None:
        return _render_form(request, user, draft.remove_ingredient(index), recipe_id)

    container = get_container(request)
    try:
        container.recipe_editor_service.save(user.id, draft, recipe_id=recipe_id)
    except RecipeValidationError as exc:
        return _render_form(
            request,
            user,
            draft,
            recipe_id,
            errors=exc.errors,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )
    except PartialSaveError as exc:
        logger.exception(
            "Recipe saved without ingredients", extra={"recipe_id": str(exc.recipe_id)}
        )
        return _render_form(
            request,
            user,
            draft,
            exc.recipe_id,
            errors=[PARTIAL_SAVE_MESSAGE],
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except RecipeSaveError as exc:
        logger.exception("Failed to save recipe", extra={"user_id": str(user.id)})
        return _render_form(
            request,
            user,
            draft,
            recipe_id,
            errors=[_format_save_error(container.settings, exc, SAVE_FAILED_MESSAGE)],
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return RedirectResponse("/recipes", status_code=status.HTTP_303_SEE_OTHER)


def _render_form(  # noqa: PLR0913
    request: Request,
    user: AuthUser,
    draft: RecipeDraft,
    recipe_id: UUID | None,
    errors: list[str] | None = None,
    status_code: int = status.HTTP_200_OK,
) -> Response:
    action_url = f"/recipes/{recipe_id}/edit" if recipe_id else "/recipes/new"
    return templates.TemplateResponse(
        request,
        "recipe_form.html",
        {
            "user": user,
            "draft": draft,
            "recipe_id": recipe_id,
            "action_url": action_url,
            "errors": errors or [],
        },
        status_code=status_code,
    )


def _render_list(
    request: Request,
    user: AuthUser,
    view: RecipeListView,
    recipe_filter: RecipeFilter,
    action_error: str | None = None,
) -> Response:
    return templates.TemplateResponse(
        request,
        "recipe_list.html",
        {
            "user": user,
            "view": view,
            "recipes": view.filtered(recipe_filter),
            "recipe_filter": recipe_filter,
            "error": action_error or view.error,
        },
    )


def _render_error(request: Request, user: AuthUser, message: str) -> Response:
    return templates.TemplateResponse(
        request,
        "error.html",
        {"user": user, "error": message},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def _filter_query(recipe_filter: RecipeFilter, error: str | None = None) -> str:
    params = {
        "q": recipe_filter.search,
        "meal_kind": recipe_filter.meal_kind.value
        if recipe_filter.meal_kind
        else "all",
    }
    if recipe_filter.favorites_only:
        params["favorites"] = "1"
    if error:
        params["error"] = error
    return urlencode(params)


def _format_save_error(settings: Settings, exc: Exception, fallback: str) -> str:
    """Return a user-facing save error with local debug info."""
    if settings.environment == "local":
        cause = exc.__cause__ or exc
        detail = f"{type(cause).__name__}: {cause}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
