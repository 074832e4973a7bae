"""Jinja2 template environment for the HTML pages."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from recipe_journal.domain.recipes import MEAL_KIND_LABELS, MealKind

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["meal_kinds"] = list(MealKind)
templates.env.globals["meal_kind_labels"] = MEAL_KIND_LABELS
