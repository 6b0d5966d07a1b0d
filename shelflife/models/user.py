"""User model."""

from sqlalchemy import JSON, Boolean, Column, Integer, String

from shelflife.database import Base
from shelflife.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication, ownership and cooking preferences."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)

    # Onboarding profile, read by recipe generation
    household_size = Column(Integer, nullable=True)
    dietary_preferences = Column(JSON, nullable=False, default=list)
    cooking_style = Column(String(100), nullable=True)
    cooking_goals = Column(JSON, nullable=False, default=list)
    onboarding_completed = Column(Boolean, nullable=False, default=False)
