"""Pydantic schemas for API requests and responses."""

from shelflife.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from shelflife.schemas.pantry import (
    PantryItemCreate,
    PantryItemResponse,
    PantryItemUpdate,
    PantryStatsResponse,
)
from shelflife.schemas.recipe import RecipeDraft, RecipeSuggestion, SuggestionResponse
from shelflife.schemas.user import OnboardingUpdate, ProfileResponse, UserProfile

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "PantryItemCreate",
    "PantryItemUpdate",
    "PantryItemResponse",
    "PantryStatsResponse",
    "RecipeDraft",
    "RecipeSuggestion",
    "SuggestionResponse",
    "UserProfile",
    "OnboardingUpdate",
    "ProfileResponse",
]
