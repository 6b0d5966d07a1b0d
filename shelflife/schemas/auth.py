"""Account schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class Credentials(BaseModel):
    """Email and password pair. Emails are compared case-insensitively."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.strip().lower()


class UserRegister(Credentials):
    """Account creation request."""

    name: str | None = Field(None, max_length=255)


class UserLogin(Credentials):
    """Sign-in request."""


class UserResponse(BaseModel):
    """Account summary returned after sign-in."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    onboarding_completed: bool = False


class AuthResponse(BaseModel):
    """Bearer token plus the signed-in account."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: UserResponse
