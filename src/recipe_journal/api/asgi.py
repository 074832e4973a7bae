"""ASGI entrypoint for the recipe journal."""

from recipe_journal.api.app import create_app
from recipe_journal.containers import build_container

app = create_app(build_container())
