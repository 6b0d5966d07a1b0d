"""Persistence gateway for pantry items, generated recipes and recipe clicks."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shelflife.models.pantry import PantryItem
from shelflife.models.recipe import GeneratedRecipe, RecipeClick
from shelflife.schemas.recipe import RecipeSuggestion

logger = logging.getLogger(__name__)

DEFAULT_RECIPE_LIMIT = 20


class PersistenceError(Exception):
    """A read or write against the database failed."""


class PersistenceGateway:
    """Per-user storage operations used by the suggestion engine.

    Every method rolls the session back and raises :class:`PersistenceError`
    when the database call fails, so callers only have one error type to
    decide about.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_pantry_items(self, user_id: int) -> list[PantryItem]:
        """Get all pantry items for a user."""
        try:
            return (
                self.db.query(PantryItem)
                .filter(PantryItem.user_id == user_id)
                .order_by(PantryItem.expiry_date, PantryItem.name)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to load pantry items for user {user_id}") from e

    def get_recipes(
        self,
        user_id: int,
        limit: int = DEFAULT_RECIPE_LIMIT,
        newest_first: bool = True,
    ) -> list[GeneratedRecipe]:
        """Get stored generated recipes for a user."""
        if newest_first:
            ordering = (GeneratedRecipe.created_at.desc(), GeneratedRecipe.id.desc())
        else:
            ordering = (GeneratedRecipe.created_at.asc(), GeneratedRecipe.id.asc())
        try:
            return (
                self.db.query(GeneratedRecipe)
                .filter(GeneratedRecipe.user_id == user_id)
                .order_by(*ordering)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to load recipes for user {user_id}") from e

    def save_recipe(self, user_id: int, recipe: RecipeSuggestion) -> GeneratedRecipe:
        """Store one generated recipe with its provenance."""
        row = GeneratedRecipe(
            user_id=user_id,
            recipe_name=recipe.recipe_name,
            description=recipe.description,
            serving_size=recipe.serving_size,
            ingredients=list(recipe.ingredients),
            instructions=list(recipe.instructions),
            estimated_time=recipe.estimated_time,
            difficulty=recipe.difficulty.value,
            triggered_by=list(recipe.triggered_by),
        )
        try:
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save recipe '{recipe.recipe_name}'") from e
        return row

    def save_recipe_click(self, user_id: int, recipe_name: str) -> RecipeClick:
        """Record that the user opened a recipe."""
        click = RecipeClick(user_id=user_id, recipe_name=recipe_name)
        try:
            self.db.add(click)
            self.db.commit()
            self.db.refresh(click)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save click for '{recipe_name}'") from e
        return click
