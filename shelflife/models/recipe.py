"""Generated recipe and recipe click models."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from shelflife.database import Base
from shelflife.models.mixins import CreatedAtMixin


class GeneratedRecipe(Base, CreatedAtMixin):
    """A recipe suggested by the generation API.

    Rows are written once and never updated. ``triggered_by`` records which
    pantry items caused the generation so that a later session can rebuild
    the trigger set from the newest row.
    """

    __tablename__ = "generated_recipes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipe_name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    serving_size = Column(String(100), nullable=False, default="")
    ingredients = Column(JSON, nullable=False, default=list)
    instructions = Column(JSON, nullable=False, default=list)
    estimated_time = Column(String(50), nullable=False, default="20-30 min")
    difficulty = Column(String(10), nullable=False, default="Easy")  # "Easy" | "Medium" | "Hard"
    triggered_by = Column(JSON, nullable=False, default=list)

    # Relationships
    user = relationship("User", backref="generated_recipes")


class RecipeClick(Base):
    """A user opened a suggested recipe."""

    __tablename__ = "recipe_clicks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    recipe_name = Column(String(255), nullable=False)
    clicked_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
