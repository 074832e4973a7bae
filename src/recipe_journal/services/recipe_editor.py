"""Draft editing and the recipe save sequence."""

import logging
from dataclasses import dataclass, field, replace
from uuid import UUID

from recipe_journal.domain.recipes import MealKind
from recipe_journal.services.recipes import RecipeNotFoundError, RecipeRepository

logger = logging.getLogger(__name__)


class RecipeValidationError(ValueError):
    """Raised when a draft fails validation; nothing has been written."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class RecipeSaveError(RuntimeError):
    """Raised when the store rejects part of a save."""


class PartialSaveError(RecipeSaveError):
    """Raised when a failed save could not be rolled back."""

    def __init__(self, message: str, recipe_id: UUID) -> None:
        super().__init__(message)
        self.recipe_id = recipe_id


@dataclass(frozen=True)
class IngredientDraft:
    """Editable ingredient row; grams may be blank while typing."""

    name: str = ""
    grams: int | None = None


@dataclass(frozen=True)
class RecipeDraft:
    """In-memory recipe being created or edited."""

    title: str = ""
    meal_kind: MealKind = MealKind.MAIN_COURSE
    instructions: str = ""
    ingredients: tuple[IngredientDraft, ...] = field(
        default_factory=lambda: (IngredientDraft(),)
    )

    def add_ingredient(self) -> "RecipeDraft":
        """Return a draft with an empty ingredient row appended."""
        return replace(self, ingredients=(*self.ingredients, IngredientDraft()))

    def remove_ingredient(self, index: int) -> "RecipeDraft":
        """Return a draft without the row at index.

        The last remaining row is never removed.
        """
        if len(self.ingredients) <= 1 or not 0 <= index < len(self.ingredients):
            return self
        return replace(
            self,
            ingredients=self.ingredients[:index] + self.ingredients[index + 1 :],
        )

    def update_ingredient(
        self,
        index: int,
        *,
        name: str | None = None,
        grams: int | None = None,
    ) -> "RecipeDraft":
        """Return a draft with one ingredient row changed."""
        current = self.ingredients[index]
        updated = IngredientDraft(
            name=current.name if name is None else name,
            grams=current.grams if grams is None else grams,
        )
        rows = list(self.ingredients)
        rows[index] = updated
        return replace(self, ingredients=tuple(rows))


def validate_draft(draft: RecipeDraft) -> list[str]:
    """Return human-readable validation problems for a draft."""
    errors: list[str] = []
    if not draft.title.strip():
        errors.append("Recipe title is required")
    if not draft.ingredients:
        errors.append("Add at least one ingredient")
    if any(
        not item.name.strip() or item.grams is None or item.grams <= 0
        for item in draft.ingredients
    ):
        errors.append("All ingredients must have a name and valid grams")
    return errors


@dataclass
class RecipeEditorService:
    """Loads drafts for editing and persists them."""

    repository: RecipeRepository

    def load_draft(self, user_id: UUID, recipe_id: UUID) -> RecipeDraft | None:
        """Return an editable draft for an owned recipe."""
        recipe = self.repository.get_recipe(recipe_id, user_id)
        if recipe is None:
            return None
        ingredients = self.repository.list_ingredients(recipe_id)
        rows = tuple(
            IngredientDraft(name=item.name, grams=item.grams) for item in ingredients
        )
        return RecipeDraft(
            title=recipe.title,
            meal_kind=recipe.meal_kind,
            instructions=recipe.instructions,
            ingredients=rows or (IngredientDraft(),),
        )

    def save(
        self, user_id: UUID, draft: RecipeDraft, recipe_id: UUID | None = None
    ) -> UUID:
        """Validate and persist a draft, returning the recipe id."""
        errors = validate_draft(draft)
        if errors:
            raise RecipeValidationError(errors)
        fields = {
            "title": draft.title.strip(),
            "instructions": draft.instructions,
            "meal_kind": draft.meal_kind.value,
        }
        items = [
            {"name": item.name.strip(), "grams": item.grams}
            for item in draft.ingredients
        ]
        if recipe_id is None:
            return self._create(user_id, fields, items)
        self._update(user_id, recipe_id, fields, items)
        return recipe_id

    def _create(
        self,
        user_id: UUID,
        fields: dict[str, object],
        items: list[dict[str, object]],
    ) -> UUID:
        try:
            recipe = self.repository.insert_recipe(user_id, fields)
        except Exception as exc:
            raise RecipeSaveError("Failed to save recipe") from exc
        try:
            self.repository.replace_ingredients(recipe.id, items)
        except Exception as exc:
            logger.warning(
                "Ingredient insert failed, removing new recipe",
                extra={"recipe_id": str(recipe.id)},
            )
            self._discard(recipe.id, user_id)
            raise RecipeSaveError("Failed to save recipe") from exc
        logger.info("Recipe created", extra={"recipe_id": str(recipe.id)})
        return recipe.id

    def _discard(self, recipe_id: UUID, user_id: UUID) -> None:
        try:
            self.repository.delete_recipe(recipe_id, user_id)
        except Exception as exc:
            raise PartialSaveError(
                "Recipe was saved without ingredients", recipe_id
            ) from exc

    def _update(
        self,
        user_id: UUID,
        recipe_id: UUID,
        fields: dict[str, object],
        items: list[dict[str, object]],
    ) -> None:
        try:
            existing = self.repository.get_recipe(recipe_id, user_id)
        except Exception as exc:
            raise RecipeSaveError("Failed to save recipe") from exc
        if existing is None:
            raise RecipeNotFoundError(recipe_id)
        try:
            self.repository.update_recipe(recipe_id, user_id, fields)
            self.repository.replace_ingredients(recipe_id, items)
        except Exception as exc:
            raise RecipeSaveError("Failed to save recipe") from exc
        logger.info("Recipe updated", extra={"recipe_id": str(recipe_id)})
