"""Parsing of submitted recipe forms."""

from fastapi import HTTPException, status
from starlette.datastructures import FormData

from recipe_journal.domain.recipes import MealKind
from recipe_journal.services.recipe_editor import IngredientDraft, RecipeDraft

SAVE = "save"
ADD_INGREDIENT = "add_ingredient"
REMOVE_INGREDIENT = "remove_ingredient"


def draft_from_form(form: FormData) -> RecipeDraft:
    """Build a draft from the posted recipe form fields."""
    names = form.getlist("ingredient_name")
    grams = form.getlist("ingredient_grams")
    rows = tuple(
        IngredientDraft(name=str(name), grams=_parse_grams(raw))
        for name, raw in zip(names, _pad(grams, len(names)), strict=True)
    )
    return RecipeDraft(
        title=str(form.get("title") or ""),
        meal_kind=_parse_meal_kind(form.get("meal_kind")),
        instructions=str(form.get("instructions") or ""),
        ingredients=rows or (IngredientDraft(),),
    )


def parse_form_action(raw: object) -> tuple[str, int | None]:
    """Parse the submit button value in the format action[:index]."""
    value = str(raw or SAVE)
    action, _, index = value.partition(":")
    if action == REMOVE_INGREDIENT and index.isdigit():
        return action, int(index)
    if action in {ADD_INGREDIENT, SAVE}:
        return action, None
    return SAVE, None


def _parse_meal_kind(raw: object) -> MealKind:
    if not raw:
        return MealKind.MAIN_COURSE
    try:
        return MealKind(str(raw))
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Unknown meal type",
        ) from exc


def _parse_grams(raw: object) -> int | None:
    value = str(raw).strip() if raw is not None else ""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _pad(values: list, length: int) -> list:
    return list(values[:length]) + [None] * (length - len(values))
