"""Enums for model fields."""

from enum import Enum


class FreshnessStatus(str, Enum):
    """Freshness of a pantry item, derived from its expiry date."""

    FRESH = "fresh"
    EXPIRING = "expiring"
    EXPIRED = "expired"

    @property
    def sort_order(self) -> int:
        """Most urgent first: expired, expiring, fresh."""
        return {"expired": 0, "expiring": 1, "fresh": 2}[self.value]


class Difficulty(str, Enum):
    """Difficulty label attached to a generated recipe."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class RecipeSource(str, Enum):
    """Where a set of suggested recipes came from."""

    GENERATED = "generated"
    FALLBACK = "fallback"
    STORED = "stored"
