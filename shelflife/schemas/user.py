"""User profile schemas."""

from pydantic import BaseModel, ConfigDict, Field


class UserProfile(BaseModel):
    """Cooking preferences used to personalise recipe suggestions."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    household_size: int | None = Field(None, ge=1, le=50)
    dietary_preferences: list[str] = Field(default_factory=list)
    cooking_style: str | None = None
    cooking_goals: list[str] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user) -> "UserProfile | None":
        """Build a profile from a user row; None until onboarding is complete."""
        if user is None or not user.onboarding_completed:
            return None
        return cls(
            household_size=user.household_size,
            dietary_preferences=list(user.dietary_preferences or []),
            cooking_style=user.cooking_style,
            cooking_goals=list(user.cooking_goals or []),
        )


class OnboardingUpdate(BaseModel):
    """Onboarding answers submitted by the user."""

    household_size: int = Field(..., ge=1, le=50)
    dietary_preferences: list[str] = Field(default_factory=list)
    cooking_style: str | None = Field(None, max_length=100)
    cooking_goals: list[str] = Field(default_factory=list)
    onboarding_completed: bool = True


class ProfileResponse(BaseModel):
    """User profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    household_size: int | None
    dietary_preferences: list[str]
    cooking_style: str | None
    cooking_goals: list[str]
    onboarding_completed: bool
