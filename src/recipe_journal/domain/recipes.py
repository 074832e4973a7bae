"""Domain models for recipes, ingredients and favorites."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class MealKind(str, Enum):
    """Course a recipe belongs to."""

    APPETIZER = "appetizer"
    MAIN_COURSE = "main_course"
    SECOND_COURSE = "second_course"
    DESSERT = "dessert"


MEAL_KIND_LABELS: dict[MealKind, str] = {
    MealKind.APPETIZER: "Appetizer",
    MealKind.MAIN_COURSE: "Main Course",
    MealKind.SECOND_COURSE: "Second Course",
    MealKind.DESSERT: "Dessert",
}


@dataclass(frozen=True)
class Recipe:
    """Represents a recipe row owned by a single user."""

    id: UUID
    user_id: UUID
    title: str
    instructions: str
    meal_kind: MealKind
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Ingredient:
    """Ingredient row belonging to exactly one recipe."""

    id: UUID
    recipe_id: UUID
    name: str
    grams: int
    position: int
    created_at: datetime


@dataclass(frozen=True)
class Favorite:
    """Marks a recipe as a favorite of its owner."""

    id: UUID
    user_id: UUID
    recipe_id: UUID
    created_at: datetime


@dataclass(frozen=True)
class RecipeWithIngredients:
    """Recipe with its ordered ingredients and favorite flag."""

    recipe: Recipe
    ingredients: list[Ingredient]
    is_favorite: bool = False
