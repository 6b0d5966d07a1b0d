"""Recipe schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from shelflife.models.enums import Difficulty, RecipeSource

DEFAULT_ESTIMATED_TIME = "20-30 min"

# --- Generation API payload ---


class RecipeDraft(BaseModel):
    """One recipe as returned by the generation API (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    recipe_name: str = Field(..., alias="recipeName", min_length=1)
    description: str = Field(..., alias="description")
    serving_size: str = Field(..., alias="servingSize")
    ingredients: list[str] = Field(..., alias="ingredients")
    instructions: list[str] = Field(..., alias="instructions")


# --- Suggested recipe ---


class RecipeSuggestion(BaseModel):
    """A complete recipe suggestion, generated or fallback. Immutable."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    recipe_name: str
    description: str
    serving_size: str
    ingredients: list[str]
    instructions: list[str]
    estimated_time: str = DEFAULT_ESTIMATED_TIME
    difficulty: Difficulty = Difficulty.EASY
    triggered_by: list[str] = Field(default_factory=list)
    created_at: datetime | None = None


class StoredRecipeResponse(RecipeSuggestion):
    """A persisted generated recipe."""

    id: int
    user_id: int
    created_at: datetime


class SuggestionResponse(BaseModel):
    """Recipes to show plus where they came from."""

    recipes: list[RecipeSuggestion]
    source: RecipeSource | None
    generated: bool
    message: str | None = None
    critical_count: int = 0
    expiring_count: int = 0
    urgent_items: list[str] = Field(default_factory=list)
    new_urgent_items: list[str] = Field(default_factory=list)
    removed_items: list[str] = Field(default_factory=list)
    dropped: bool = False


# --- Trigger state ---


class TriggerStateResponse(BaseModel):
    """Names of the urgent items that caused the latest generation."""

    last_triggered_item_names: list[str]


# --- Recipe clicks ---


class RecipeClickCreate(BaseModel):
    """Record that a suggested recipe was opened."""

    recipe_name: str = Field(..., min_length=1, max_length=255)


class RecipeClickResult(BaseModel):
    """Outcome of recording a recipe click."""

    recipe_name: str
    recorded: bool
