"""Trigger debouncer deciding when pantry changes warrant new recipes."""

import logging
from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shelflife.models.recipe import GeneratedRecipe
from shelflife.models.trigger_state import RecipeTriggerState
from shelflife.services.freshness import HasExpiry, UrgencyBands, partition
from shelflife.services.persistence import PersistenceError

logger = logging.getLogger(__name__)


class TriggerPhase(str, Enum):
    """Where a session is in the suggestion cycle."""

    IDLE = "idle"
    EVALUATING = "evaluating"
    GENERATING = "generating"


@dataclass(frozen=True)
class TriggerState:
    """Names of the urgent items that caused the most recent generation."""

    last_triggered_item_names: frozenset[str] = frozenset()

    @classmethod
    def of(cls, names: Iterable[str]) -> "TriggerState":
        return cls(frozenset(names))

    @classmethod
    def empty(cls) -> "TriggerState":
        return cls()


@dataclass(frozen=True)
class TriggerDecision:
    """Outcome of evaluating one pantry snapshot against the trigger state."""

    should_generate: bool
    bands: UrgencyBands
    urgent_names: frozenset[str] = frozenset()
    new_urgent_names: frozenset[str] = frozenset()
    removed_names: frozenset[str] = frozenset()
    dropped: bool = False

    @property
    def next_state(self) -> TriggerState:
        """State to store when this decision starts a generation."""
        return TriggerState(self.urgent_names)


def decide_trigger(
    items: Iterable[HasExpiry],
    state: TriggerState,
    today: date,
    generating: bool = False,
) -> TriggerDecision:
    """Decide whether the current pantry needs a fresh set of recipes.

    Generation is warranted when there is at least one urgent item and either
    an urgent item is not in the stored trigger set, or an item from the
    trigger set is gone from the pantry entirely. An item that merely stopped
    being urgent does not count as removed.
    """
    items = list(items)
    bands = partition(items, today)
    urgent_names = bands.urgent_names
    all_names = {item.name for item in items}
    previous = state.last_triggered_item_names

    new_urgent = urgent_names - previous
    removed = previous - all_names

    should_generate = bool(urgent_names) and bool(new_urgent or removed) and not generating

    return TriggerDecision(
        should_generate=should_generate,
        bands=bands,
        urgent_names=urgent_names,
        new_urgent_names=frozenset(new_urgent),
        removed_names=frozenset(removed),
        dropped=generating and bool(urgent_names) and bool(new_urgent or removed),
    )


class TriggerDebouncer:
    """Per-session phase machine around :func:`decide_trigger`.

    A session moves ``idle -> evaluating -> idle`` when nothing needs to
    happen, or ``idle -> evaluating -> generating`` when a generation should
    start. While a session is generating, further events are dropped rather
    than queued. :meth:`complete` returns the session to ``idle``.
    """

    def __init__(self) -> None:
        self._phases: dict[Hashable, TriggerPhase] = {}

    def phase(self, session_key: Hashable) -> TriggerPhase:
        return self._phases.get(session_key, TriggerPhase.IDLE)

    def is_generating(self, session_key: Hashable) -> bool:
        return self.phase(session_key) == TriggerPhase.GENERATING

    def evaluate(
        self,
        session_key: Hashable,
        items: Iterable[HasExpiry],
        state: TriggerState,
        today: date,
    ) -> TriggerDecision:
        """Evaluate a pantry snapshot, entering ``generating`` when warranted."""
        generating = self.is_generating(session_key)
        if not generating:
            self._phases[session_key] = TriggerPhase.EVALUATING

        decision = decide_trigger(items, state, today, generating=generating)

        if generating:
            if decision.dropped:
                logger.info(f"Dropping trigger for session {session_key}: generation in flight")
            return decision

        if decision.should_generate:
            self._phases[session_key] = TriggerPhase.GENERATING
        else:
            self._phases.pop(session_key, None)
        return decision

    def complete(self, session_key: Hashable) -> None:
        """Mark the in-flight generation for a session as finished."""
        self._phases.pop(session_key, None)


# --- Trigger state storage ---


class TriggerStateStore(Protocol):
    """Port for loading and saving a user's trigger state."""

    def load(self, user_id: int) -> TriggerState: ...

    def save(self, user_id: int, state: TriggerState) -> None: ...


class InMemoryTriggerStateStore:
    """Trigger state kept in a dict, for tests and single-process tools."""

    def __init__(self, initial: dict[int, TriggerState] | None = None) -> None:
        self.states: dict[int, TriggerState] = dict(initial or {})

    def load(self, user_id: int) -> TriggerState:
        return self.states.get(user_id, TriggerState.empty())

    def save(self, user_id: int, state: TriggerState) -> None:
        self.states[user_id] = state


class SqlTriggerStateStore:
    """Trigger state stored in ``recipe_trigger_states``.

    With no stored row, the state is rebuilt from the ``triggered_by`` field
    of the user's newest generated recipe, so users whose recipes predate
    the table keep their debounce history.
    """

    def __init__(self, db: Session):
        self.db = db

    def load(self, user_id: int) -> TriggerState:
        try:
            row = (
                self.db.query(RecipeTriggerState)
                .filter(RecipeTriggerState.user_id == user_id)
                .first()
            )
            if row is not None:
                return TriggerState.of(row.item_names or [])

            newest = (
                self.db.query(GeneratedRecipe)
                .filter(GeneratedRecipe.user_id == user_id)
                .order_by(GeneratedRecipe.created_at.desc(), GeneratedRecipe.id.desc())
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to load trigger state for user {user_id}") from e

        if newest is not None and newest.triggered_by:
            logger.info(f"Recovered trigger state for user {user_id} from recipe {newest.id}")
            return TriggerState.of(newest.triggered_by)
        return TriggerState.empty()

    def save(self, user_id: int, state: TriggerState) -> None:
        names = sorted(state.last_triggered_item_names)
        try:
            row = (
                self.db.query(RecipeTriggerState)
                .filter(RecipeTriggerState.user_id == user_id)
                .first()
            )
            if row is None:
                self.db.add(RecipeTriggerState(user_id=user_id, item_names=names))
            else:
                row.item_names = names
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to save trigger state for user {user_id}") from e

