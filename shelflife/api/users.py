"""User profile and onboarding endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shelflife.api.dependencies import get_current_user
from shelflife.database import get_db
from shelflife.models.user import User
from shelflife.schemas.user import OnboardingUpdate, ProfileResponse
from shelflife.services.auth import update_onboarding

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me/profile", response_model=ProfileResponse)
def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get the current user's cooking profile."""
    return current_user


@router.put("/onboarding", response_model=ProfileResponse)
def complete_onboarding(
    data: OnboardingUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Save household size, diet, cooking style and goals."""
    return update_onboarding(db, current_user, data)
