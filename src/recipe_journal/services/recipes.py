"""Persistence interface shared by the recipe services."""

from typing import Protocol
from uuid import UUID

from recipe_journal.domain.recipes import Ingredient, Recipe, RecipeWithIngredients


class RecipeNotFoundError(LookupError):
    """Raised when a recipe is missing or not owned by the caller."""

    def __init__(self, recipe_id: UUID | str) -> None:
        super().__init__(f"Recipe {recipe_id} not found")
        self.recipe_id = recipe_id


class RecipeRepository(Protocol):
    """Persistence interface for recipes, ingredients and favorites.

    Every read and write is scoped by the filters the caller passes in;
    implementations perform no authorization of their own.
    """

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return a user's recipes, newest first."""

    def list_recipes_with_ingredients(
        self, user_id: UUID
    ) -> list[RecipeWithIngredients]:
        """Return a user's recipes joined with ingredients and favorite flags."""

    def get_recipe(self, recipe_id: UUID, user_id: UUID) -> Recipe | None:
        """Return a recipe when it exists and belongs to the user."""

    def list_ingredients(self, recipe_id: UUID) -> list[Ingredient]:
        """Return a recipe's ingredients in insertion order."""

    def insert_recipe(self, user_id: UUID, fields: dict[str, object]) -> Recipe:
        """Create a recipe and return it."""

    def update_recipe(
        self, recipe_id: UUID, user_id: UUID, fields: dict[str, object]
    ) -> Recipe:
        """Update a recipe's fields and refresh its update timestamp."""

    def delete_recipe(self, recipe_id: UUID, user_id: UUID) -> None:
        """Delete a recipe together with its ingredients and favorites."""

    def replace_ingredients(
        self, recipe_id: UUID, items: list[dict[str, object]]
    ) -> None:
        """Atomically replace the full ingredient set of a recipe."""

    def is_favorite(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return True when the user has favorited the recipe."""

    def list_favorite_recipe_ids(self, user_id: UUID) -> set[UUID]:
        """Return ids of every recipe the user has favorited."""

    def add_favorite(self, user_id: UUID, recipe_id: UUID) -> None:
        """Mark a recipe as favorite; a no-op when already marked."""

    def remove_favorite(self, user_id: UUID, recipe_id: UUID) -> None:
        """Remove a favorite marker, if present."""
