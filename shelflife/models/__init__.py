"""SQLAlchemy models."""

from shelflife.models.pantry import PantryItem
from shelflife.models.recipe import GeneratedRecipe, RecipeClick
from shelflife.models.trigger_state import RecipeTriggerState
from shelflife.models.user import User

__all__ = [
    "User",
    "PantryItem",
    "GeneratedRecipe",
    "RecipeClick",
    "RecipeTriggerState",
]
