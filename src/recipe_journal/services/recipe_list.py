"""Recipe list loading and client-side filtering."""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from recipe_journal.domain.recipes import MealKind, RecipeWithIngredients
from recipe_journal.services.recipes import RecipeNotFoundError, RecipeRepository

logger = logging.getLogger(__name__)

ALL_MEAL_KINDS = "all"
LOAD_ERROR_MESSAGE = "Couldn't load your recipes. Please refresh the page."


class ListStatus(str, Enum):
    """Lifecycle of a recipe list view."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class RecipeFilter:
    """Filter inputs applied to a loaded recipe list."""

    search: str = ""
    meal_kind: MealKind | None = None
    favorites_only: bool = False

    @classmethod
    def from_params(
        cls,
        search: str | None,
        meal_kind: str | None,
        favorites: str | None,
    ) -> "RecipeFilter":
        """Build a filter from raw query parameters."""
        kind: MealKind | None = None
        if meal_kind and meal_kind != ALL_MEAL_KINDS:
            try:
                kind = MealKind(meal_kind)
            except ValueError:
                kind = None
        return cls(
            search=search or "",
            meal_kind=kind,
            favorites_only=favorites in {"1", "true", "on", "yes"},
        )


def filter_recipes(
    recipes: list[RecipeWithIngredients], recipe_filter: RecipeFilter
) -> list[RecipeWithIngredients]:
    """Return the recipes matching every active filter, preserving order."""
    needle = recipe_filter.search.lower()
    return [
        entry
        for entry in recipes
        if needle in entry.recipe.title.lower()
        and (
            recipe_filter.meal_kind is None
            or entry.recipe.meal_kind == recipe_filter.meal_kind
        )
        and (not recipe_filter.favorites_only or entry.is_favorite)
    ]


@dataclass
class RecipeListView:
    """Loaded recipes plus the state of the load."""

    status: ListStatus = ListStatus.IDLE
    recipes: list[RecipeWithIngredients] = field(default_factory=list)
    error: str | None = None

    def filtered(self, recipe_filter: RecipeFilter) -> list[RecipeWithIngredients]:
        """Return the loaded recipes that satisfy the filter."""
        return filter_recipes(self.recipes, recipe_filter)


@dataclass
class RecipeListService:
    """Loads a user's recipes and applies list-level mutations."""

    repository: RecipeRepository
    load_attempts: int = 2
    retry_delay_seconds: float = 0.3

    def load(self, user_id: UUID) -> RecipeListView:
        """Load every recipe for the user, retrying failed reads."""
        view = RecipeListView(status=ListStatus.LOADING)
        attempts = max(1, self.load_attempts)
        for attempt in range(1, attempts + 1):
            try:
                view.recipes = self.repository.list_recipes_with_ingredients(user_id)
            except Exception:
                logger.exception(
                    "Failed to load recipes",
                    extra={"user_id": str(user_id), "attempt": attempt},
                )
                if attempt < attempts:
                    time.sleep(self.retry_delay_seconds)
                continue
            view.status = ListStatus.READY
            return view
        view.status = ListStatus.ERROR
        view.error = LOAD_ERROR_MESSAGE
        return view

    def toggle_favorite(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Flip the favorite flag of an owned recipe and return the new state."""
        if self.repository.get_recipe(recipe_id, user_id) is None:
            raise RecipeNotFoundError(recipe_id)
        if self.repository.is_favorite(user_id, recipe_id):
            self.repository.remove_favorite(user_id, recipe_id)
            return False
        self.repository.add_favorite(user_id, recipe_id)
        return True

    def delete_recipe(self, user_id: UUID, recipe_id: UUID) -> None:
        """Delete a recipe; the list is reloaded by the next load."""
        self.repository.delete_recipe(recipe_id, user_id)
        logger.info("Recipe deleted from list", extra={"recipe_id": str(recipe_id)})
