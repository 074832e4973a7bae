"""Recipe detail, favorite toggling and deletion."""

import logging
from dataclasses import dataclass
from uuid import UUID

from recipe_journal.domain.recipes import RecipeWithIngredients
from recipe_journal.services.recipes import RecipeNotFoundError, RecipeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FavoriteToggle:
    """Outcome of a favorite toggle request."""

    is_favorite: bool
    failed: bool = False


@dataclass
class RecipeDetailService:
    """Service backing the single-recipe page."""

    repository: RecipeRepository

    def load(self, user_id: UUID, recipe_id: UUID) -> RecipeWithIngredients | None:
        """Return the recipe with ingredients and favorite flag, if owned."""
        recipe = self.repository.get_recipe(recipe_id, user_id)
        if recipe is None:
            return None
        return RecipeWithIngredients(
            recipe=recipe,
            ingredients=self.repository.list_ingredients(recipe_id),
            is_favorite=self.repository.is_favorite(user_id, recipe_id),
        )

    def toggle_favorite(
        self, user_id: UUID, recipe_id: UUID, currently_favorite: bool
    ) -> FavoriteToggle:
        """Request the opposite favorite state.

        The new state is only reported once the store accepted it; on failure
        the previous state is returned.
        """
        try:
            owned = self.repository.get_recipe(recipe_id, user_id) is not None
            if owned and currently_favorite:
                self.repository.remove_favorite(user_id, recipe_id)
            elif owned:
                self.repository.add_favorite(user_id, recipe_id)
        except Exception:
            logger.exception(
                "Failed to toggle favorite", extra={"recipe_id": str(recipe_id)}
            )
            return FavoriteToggle(is_favorite=currently_favorite, failed=True)
        if not owned:
            raise RecipeNotFoundError(recipe_id)
        return FavoriteToggle(is_favorite=not currently_favorite)

    def delete_recipe(self, user_id: UUID, recipe_id: UUID, confirmed: bool) -> bool:
        """Delete an owned recipe once the user has confirmed."""
        if not confirmed:
            return False
        if self.repository.get_recipe(recipe_id, user_id) is None:
            raise RecipeNotFoundError(recipe_id)
        self.repository.delete_recipe(recipe_id, user_id)
        logger.info("Recipe deleted", extra={"recipe_id": str(recipe_id)})
        return True
