"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import Client, create_client

from recipe_journal.adapters.supabase_auth_gateway import SupabaseAuthGateway
from recipe_journal.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from recipe_journal.config import Settings
from recipe_journal.services.auth import SessionGate
from recipe_journal.services.recipe_detail import RecipeDetailService
from recipe_journal.services.recipe_editor import RecipeEditorService
from recipe_journal.services.recipe_list import RecipeListService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_gate: SessionGate
    recipe_list_service: RecipeListService
    recipe_editor_service: RecipeEditorService
    recipe_detail_service: RecipeDetailService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )

    def sign_in_client() -> Client:
        return create_client(
            resolved_settings.supabase_url, resolved_settings.supabase_anon_key
        )

    recipe_repository = SupabaseRecipeRepository(supabase_client)
    auth_gateway = SupabaseAuthGateway(
        client=supabase_client,
        sign_in_client_factory=sign_in_client,
    )
    return AppContainer(
        settings=resolved_settings,
        session_gate=SessionGate(auth_gateway),
        recipe_list_service=RecipeListService(
            repository=recipe_repository,
            load_attempts=resolved_settings.recipe_list_load_attempts,
            retry_delay_seconds=resolved_settings.recipe_list_retry_delay_seconds,
        ),
        recipe_editor_service=RecipeEditorService(recipe_repository),
        recipe_detail_service=RecipeDetailService(recipe_repository),
    )
