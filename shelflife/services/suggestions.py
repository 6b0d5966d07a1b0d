"""Recipe suggestion service tying freshness, triggering and generation together."""

import logging
from datetime import date

from shelflife.config import get_settings
from shelflife.models.enums import FreshnessStatus, RecipeSource
from shelflife.schemas.recipe import RecipeSuggestion, SuggestionResponse
from shelflife.schemas.user import UserProfile
from shelflife.services.freshness import HasExpiry, classify, today_in_timezone
from shelflife.services.persistence import PersistenceError, PersistenceGateway
from shelflife.services.recipe_generation import (
    RECIPES_PER_GENERATION,
    GenerationResult,
    RecipeGenerationPipeline,
)
from shelflife.services.trigger import (
    TriggerDebouncer,
    TriggerDecision,
    TriggerState,
    TriggerStateStore,
)

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "API unavailable, showing curated recipes instead."


class RecipeSuggestionService:
    """Entry point used by the pantry and recipe endpoints.

    Every pantry mutation calls :meth:`evaluate_and_maybe_generate`; the
    debouncer decides whether that mutation is worth a new generation call.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        pipeline: RecipeGenerationPipeline,
        state_store: TriggerStateStore,
        debouncer: TriggerDebouncer,
        timezone: str | None = None,
    ):
        self.gateway = gateway
        self.pipeline = pipeline
        self.state_store = state_store
        self.debouncer = debouncer
        self.timezone = timezone or get_settings().timezone

    def today(self) -> date:
        return today_in_timezone(self.timezone)

    def classify(self, item: HasExpiry, today: date | None = None) -> FreshnessStatus:
        """Freshness of a single item as of ``today`` (default: now)."""
        return classify(item.expiry_date, today or self.today())

    def trigger_state(self, user_id: int) -> TriggerState:
        return self.state_store.load(user_id)

    async def evaluate_and_maybe_generate(
        self,
        user_id: int,
        items: list[HasExpiry] | None = None,
        profile: UserProfile | None = None,
    ) -> SuggestionResponse:
        """Re-evaluate the pantry and generate recipes if the trigger fires.

        When nothing needs generating, the newest stored recipes are returned
        instead. Generation failures never raise; they come back as fallback
        recipes.
        """
        if items is None:
            items = self.gateway.get_pantry_items(user_id)
        return await self._evaluate(user_id, items, self.state_store.load(user_id), profile)

    async def force_refresh(
        self,
        user_id: int,
        items: list[HasExpiry] | None = None,
        profile: UserProfile | None = None,
    ) -> SuggestionResponse:
        """Forget the trigger set and re-evaluate, forcing generation if anything is urgent.

        A refresh while this user's generation is in flight is dropped and
        leaves the stored trigger set alone.
        """
        if items is None:
            items = self.gateway.get_pantry_items(user_id)

        if self.debouncer.is_generating(user_id):
            decision = self.debouncer.evaluate(user_id, items, TriggerState.empty(), self.today())
            logger.info(f"Manual recipe refresh for user {user_id} dropped: generation in flight")
            return self._without_generation(user_id, decision)

        logger.info(f"Manual recipe refresh for user {user_id}")
        self._save_state(user_id, TriggerState.empty())
        return await self._evaluate(user_id, items, TriggerState.empty(), profile)

    async def _evaluate(
        self,
        user_id: int,
        items: list[HasExpiry],
        state: TriggerState,
        profile: UserProfile | None,
    ) -> SuggestionResponse:
        decision = self.debouncer.evaluate(user_id, items, state, self.today())

        if not decision.should_generate:
            return self._without_generation(user_id, decision)

        try:
            # Stored before the generation call so rapid follow-up events
            # compare against the new trigger set
            self._save_state(user_id, decision.next_state)

            if decision.removed_names:
                logger.info(
                    f"Regenerating recipes for user {user_id}: "
                    f"removed {sorted(decision.removed_names)}"
                )
            if decision.new_urgent_names:
                logger.info(
                    f"Generating recipes for user {user_id}: "
                    f"new urgent {sorted(decision.new_urgent_names)}"
                )

            result = await self.pipeline.generate(user_id, decision.bands.urgent, profile)
        finally:
            self.debouncer.complete(user_id)

        if result.is_fallback:
            logger.warning(f"Showing fallback recipes to user {user_id}: {result.error}")
        return self._with_generation(decision, result)

    def _save_state(self, user_id: int, state: TriggerState) -> None:
        """Store the trigger set; a failed write is logged and evaluation goes on."""
        try:
            self.state_store.save(user_id, state)
        except PersistenceError as e:
            logger.error(f"Could not store trigger state for user {user_id}: {e}")

    def stored_recipes(
        self, user_id: int, limit: int = RECIPES_PER_GENERATION
    ) -> list[RecipeSuggestion]:
        """Newest stored recipes; an unreadable store yields an empty list."""
        try:
            rows = self.gateway.get_recipes(user_id, limit=limit)
        except PersistenceError as e:
            logger.error(f"Could not load stored recipes for user {user_id}: {e}")
            return []
        return [RecipeSuggestion.model_validate(row) for row in rows]

    def record_click(self, user_id: int, recipe_name: str) -> bool:
        """Record a recipe click. Failures are logged and reported as False."""
        try:
            self.gateway.save_recipe_click(user_id, recipe_name)
        except PersistenceError as e:
            logger.warning(f"Could not record click on '{recipe_name}' for user {user_id}: {e}")
            return False
        return True

    def _without_generation(self, user_id: int, decision: TriggerDecision) -> SuggestionResponse:
        recipes = self.stored_recipes(user_id)
        return SuggestionResponse(
            recipes=recipes,
            source=RecipeSource.STORED if recipes else None,
            generated=False,
            **_decision_fields(decision),
        )

    def _with_generation(
        self, decision: TriggerDecision, result: GenerationResult
    ) -> SuggestionResponse:
        count = len(result.recipes)
        if result.is_fallback:
            message = FALLBACK_MESSAGE
        elif decision.removed_names:
            used = ", ".join(sorted(decision.removed_names))
            message = f"Updated recipes after using {used}. Found {count} new suggestions!"
        else:
            message = f"Created {count} recipes using your expiring ingredients."

        return SuggestionResponse(
            recipes=result.recipes,
            source=result.source,
            generated=True,
            message=message,
            **_decision_fields(decision),
        )


def _decision_fields(decision: TriggerDecision) -> dict:
    return {
        "critical_count": len(decision.bands.critical),
        "expiring_count": len(decision.bands.expiring),
        "urgent_items": [item.name for item in decision.bands.urgent],
        "new_urgent_items": sorted(decision.new_urgent_names),
        "removed_items": sorted(decision.removed_names),
        "dropped": decision.dropped,
    }
