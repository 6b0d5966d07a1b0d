"""Recipe suggestion API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from shelflife.api.dependencies import get_current_user, get_suggestion_service
from shelflife.models.user import User
from shelflife.schemas.recipe import (
    RecipeClickCreate,
    RecipeClickResult,
    StoredRecipeResponse,
    SuggestionResponse,
    TriggerStateResponse,
)
from shelflife.schemas.user import UserProfile
from shelflife.services.persistence import DEFAULT_RECIPE_LIMIT, PersistenceError
from shelflife.services.suggestions import RecipeSuggestionService

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])


@router.get("", response_model=list[StoredRecipeResponse])
def list_recipes(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
    limit: Annotated[int, Query(ge=1, le=100)] = DEFAULT_RECIPE_LIMIT,
):
    """List stored generated recipes, newest first."""
    try:
        return service.gateway.get_recipes(current_user.id, limit=limit)
    except PersistenceError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch recipes",
        ) from None


@router.get("/suggestions", response_model=SuggestionResponse)
async def get_suggestions(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Evaluate the pantry now, generating recipes if the trigger fires."""
    try:
        return await service.evaluate_and_maybe_generate(
            current_user.id, profile=UserProfile.from_user(current_user)
        )
    except PersistenceError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch pantry items",
        ) from None


@router.post("/refresh", response_model=SuggestionResponse)
async def refresh_suggestions(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Forget the trigger set and regenerate recipes for all urgent items."""
    try:
        return await service.force_refresh(
            current_user.id, profile=UserProfile.from_user(current_user)
        )
    except PersistenceError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to refresh recipes",
        ) from None


@router.get("/trigger-state", response_model=TriggerStateResponse)
def get_trigger_state(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Names of the urgent items behind the latest generation."""
    state = service.trigger_state(current_user.id)
    return TriggerStateResponse(last_triggered_item_names=sorted(state.last_triggered_item_names))


@router.post("/clicks", response_model=RecipeClickResult, status_code=status.HTTP_201_CREATED)
def record_recipe_click(
    click: RecipeClickCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Record that a recipe was opened. Storage failures are not reported as errors."""
    recorded = service.record_click(current_user.id, click.recipe_name)
    return RecipeClickResult(recipe_name=click.recipe_name, recorded=recorded)
