"""Supabase repository for recipes, ingredients and favorites."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from recipe_journal.domain.recipes import (
    Ingredient,
    MealKind,
    Recipe,
    RecipeWithIngredients,
)
from recipe_journal.services.recipes import RecipeRepository

_RECIPE_COLUMNS = "id, user_id, title, instructions, meal_kind, created_at, updated_at"
_INGREDIENT_COLUMNS = "id, recipe_id, name, grams, position, created_at"


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipe persistence."""

    client: Client

    def list_recipes(self, user_id: UUID) -> list[Recipe]:
        """Return a user's recipes, newest first."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def list_recipes_with_ingredients(
        self, user_id: UUID
    ) -> list[RecipeWithIngredients]:
        """Return recipes with embedded ingredients and favorite flags."""
        response = (
            self.client.table("recipes")
            .select(f"{_RECIPE_COLUMNS}, ingredients({_INGREDIENT_COLUMNS})")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .execute()
        )
        favorite_ids = self.list_favorite_recipe_ids(user_id)
        results = []
        for row in response.data or []:
            recipe = _parse_recipe(row)
            ingredients = [
                _parse_ingredient(item) for item in row.get("ingredients") or []
            ]
            results.append(
                RecipeWithIngredients(
                    recipe=recipe,
                    ingredients=_in_insertion_order(ingredients),
                    is_favorite=recipe.id in favorite_ids,
                )
            )
        return results

    def get_recipe(self, recipe_id: UUID, user_id: UUID) -> Recipe | None:
        """Return a recipe by id when owned by the user."""
        response = (
            self.client.table("recipes")
            .select(_RECIPE_COLUMNS)
            .eq("id", str(recipe_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def list_ingredients(self, recipe_id: UUID) -> list[Ingredient]:
        """Return ingredients for a recipe in insertion order."""
        response = (
            self.client.table("ingredients")
            .select(_INGREDIENT_COLUMNS)
            .eq("recipe_id", str(recipe_id))
            .order("position", desc=False)
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_ingredient(row) for row in response.data or []]

    def insert_recipe(self, user_id: UUID, fields: dict[str, object]) -> Recipe:
        """Create a recipe row and return it."""
        response = (
            self.client.table("recipes")
            .insert({"user_id": str(user_id), **fields})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        return _parse_recipe(response.data[0])

    def update_recipe(
        self, recipe_id: UUID, user_id: UUID, fields: dict[str, object]
    ) -> Recipe:
        """Update a recipe row and return it."""
        response = (
            self.client.table("recipes")
            .update({**fields, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(recipe_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update recipe")
        return _parse_recipe(response.data[0])

    def delete_recipe(self, recipe_id: UUID, user_id: UUID) -> None:
        """Delete a recipe; ingredients and favorites cascade in the database."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def replace_ingredients(
        self, recipe_id: UUID, items: list[dict[str, object]]
    ) -> None:
        """Swap the ingredient set in one database transaction."""
        self.client.rpc(
            "replace_recipe_ingredients",
            {
                "p_recipe_id": str(recipe_id),
                "p_ingredients": [
                    {"name": item["name"], "grams": item["grams"]} for item in items
                ],
            },
        ).execute()

    def is_favorite(self, user_id: UUID, recipe_id: UUID) -> bool:
        """Return True when a favorite row exists."""
        response = (
            self.client.table("favorites")
            .select("id")
            .eq("user_id", str(user_id))
            .eq("recipe_id", str(recipe_id))
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def list_favorite_recipe_ids(self, user_id: UUID) -> set[UUID]:
        """Return favorited recipe ids for a user."""
        response = (
            self.client.table("favorites")
            .select("recipe_id")
            .eq("user_id", str(user_id))
            .execute()
        )
        return {UUID(row["recipe_id"]) for row in response.data or []}

    def add_favorite(self, user_id: UUID, recipe_id: UUID) -> None:
        """Insert a favorite row unless one already exists."""
        self.client.table("favorites").upsert(
            {"user_id": str(user_id), "recipe_id": str(recipe_id)},
            on_conflict="user_id,recipe_id",
            ignore_duplicates=True,
        ).execute()

    def remove_favorite(self, user_id: UUID, recipe_id: UUID) -> None:
        """Delete the favorite row for a user and recipe."""
        self.client.table("favorites").delete().eq("user_id", str(user_id)).eq(
            "recipe_id", str(recipe_id)
        ).execute()


def _parse_recipe(row: dict[str, object]) -> Recipe:
    return Recipe(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        title=str(row.get("title", "")),
        instructions=str(row.get("instructions") or ""),
        meal_kind=MealKind(row["meal_kind"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row.get("updated_at") or row["created_at"]),
    )


def _parse_ingredient(row: dict[str, object]) -> Ingredient:
    return Ingredient(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        name=str(row.get("name", "")),
        grams=int(row.get("grams", 0)),
        position=int(row.get("position") or 0),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _in_insertion_order(ingredients: list[Ingredient]) -> list[Ingredient]:
    return sorted(ingredients, key=lambda item: (item.position, item.created_at))
