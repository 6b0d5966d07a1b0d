"""Stored trigger set for recipe auto-generation."""

from sqlalchemy import JSON, Column, ForeignKey, Integer

from shelflife.database import Base
from shelflife.models.mixins import TimestampMixin


class RecipeTriggerState(Base, TimestampMixin):
    """Names of the urgent items that last caused a recipe generation.

    One row per user. Replaced in full every time a generation starts or the
    user forces a refresh.
    """

    __tablename__ = "recipe_trigger_states"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True, index=True)
    item_names = Column(JSON, nullable=False, default=list)
