"""Recipe generation pipeline: prompt, call, validate, persist, or fall back."""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from shelflife.config import get_settings
from shelflife.models.enums import Difficulty, RecipeSource
from shelflife.schemas.recipe import DEFAULT_ESTIMATED_TIME, RecipeDraft, RecipeSuggestion
from shelflife.schemas.user import UserProfile
from shelflife.services.fallback_recipes import get_fallback_recipes
from shelflife.services.freshness import HasExpiry
from shelflife.services.llm import GenerationError, LLMService, MalformedResponse
from shelflife.services.llm_prompts import RECIPE_RESPONSE_SCHEMA, get_recipe_suggestion_prompt
from shelflife.services.persistence import PersistenceError, PersistenceGateway

logger = logging.getLogger(__name__)

RECIPES_PER_GENERATION = 3

_drafts_adapter = TypeAdapter(list[RecipeDraft])


# --- Response validation ---


@dataclass(frozen=True)
class RecipesParsed:
    """The response was a non-empty array of well-formed recipes."""

    drafts: list[RecipeDraft]


@dataclass(frozen=True)
class SchemaError:
    """The response did not match the requested schema."""

    reason: str


@dataclass(frozen=True)
class EmptyError:
    """The response was a valid but empty array."""

    reason: str = "Generation API returned no recipes"


ParseResult = RecipesParsed | SchemaError | EmptyError


def parse_recipe_response(payload: Any) -> ParseResult:
    """Validate decoded JSON from the generation API."""
    if not isinstance(payload, list):
        return SchemaError(f"Expected a JSON array, got {type(payload).__name__}")
    if not payload:
        return EmptyError()
    try:
        drafts = _drafts_adapter.validate_python(payload)
    except ValidationError as e:
        return SchemaError(f"Recipe entries do not match schema: {e.error_count()} error(s)")
    return RecipesParsed(drafts)


def adjust_serving_size(serving_size: str, profile: UserProfile | None) -> str:
    """Rewrite the serving size for larger households.

    Only a substring check against the household numeral: "Serves 4-6" is
    left alone for a household of 4, "Serves 2" becomes "Serves 4".
    """
    if profile is None or not profile.household_size or profile.household_size <= 1:
        return serving_size
    household = str(profile.household_size)
    if household in serving_size:
        return serving_size
    return f"Serves {household}"


def build_suggestions(
    drafts: list[RecipeDraft],
    triggered_by: list[str],
    profile: UserProfile | None,
) -> list[RecipeSuggestion]:
    """Take the first three drafts and fill in the fields the model is not asked for."""
    return [
        RecipeSuggestion(
            recipe_name=draft.recipe_name,
            description=draft.description,
            serving_size=adjust_serving_size(draft.serving_size, profile),
            ingredients=draft.ingredients,
            instructions=draft.instructions,
            estimated_time=DEFAULT_ESTIMATED_TIME,
            difficulty=Difficulty.EASY,
            triggered_by=list(triggered_by),
        )
        for draft in drafts[:RECIPES_PER_GENERATION]
    ]


# --- Pipeline ---


@dataclass
class GenerationResult:
    """Recipes produced by one pipeline run."""

    recipes: list[RecipeSuggestion]
    source: RecipeSource
    saved_count: int = 0
    error: str | None = None

    @property
    def is_fallback(self) -> bool:
        return self.source == RecipeSource.FALLBACK


class RecipeGenerationPipeline:
    """Generates recipes for urgent pantry items.

    Never raises for generation problems: any :class:`GenerationError` turns
    into the canned fallback recipes, which are returned but not stored.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        llm_service: LLMService | None = None,
    ):
        self.gateway = gateway
        self.llm_service = llm_service or LLMService()
        self.settings = get_settings()

    async def generate(
        self,
        user_id: int,
        urgent_items: list[HasExpiry],
        profile: UserProfile | None = None,
    ) -> GenerationResult:
        """Generate, validate and store recipes for the given urgent items."""
        triggered_by = [item.name for item in urgent_items]

        try:
            recipes = await self._request_recipes(triggered_by, profile)
        except GenerationError as e:
            logger.warning(
                f"Recipe generation failed for user {user_id} "
                f"({type(e).__name__}: {e}); using fallback recipes"
            )
            return GenerationResult(
                recipes=get_fallback_recipes(profile, triggered_by),
                source=RecipeSource.FALLBACK,
                error=str(e),
            )

        saved_count = self._persist(user_id, recipes)
        logger.info(
            f"Generated {len(recipes)} recipes for user {user_id} "
            f"from {triggered_by} ({saved_count} saved)"
        )
        return GenerationResult(
            recipes=recipes,
            source=RecipeSource.GENERATED,
            saved_count=saved_count,
        )

    async def _request_recipes(
        self,
        ingredient_names: list[str],
        profile: UserProfile | None,
    ) -> list[RecipeSuggestion]:
        prompt = get_recipe_suggestion_prompt(ingredient_names, profile)
        logger.debug(f"Recipe prompt: {prompt}")

        payload = await self.llm_service.generate_json(
            prompt=prompt,
            response_schema=RECIPE_RESPONSE_SCHEMA,
            temperature=self.settings.recipe_temperature,
            max_tokens=self.settings.recipe_max_output_tokens,
        )

        result = parse_recipe_response(payload)
        if not isinstance(result, RecipesParsed):
            raise MalformedResponse(result.reason)
        return build_suggestions(result.drafts, ingredient_names, profile)

    def _persist(self, user_id: int, recipes: list[RecipeSuggestion]) -> int:
        """Save recipes one at a time; a failed save does not stop the rest."""
        saved = 0
        for recipe in recipes:
            try:
                self.gateway.save_recipe(user_id, recipe)
                saved += 1
            except PersistenceError as e:
                logger.error(f"Could not save recipe '{recipe.recipe_name}': {e}")
        return saved
