"""Pantry schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from shelflife.models.enums import FreshnessStatus
from shelflife.schemas.recipe import SuggestionResponse


class PantryItemCreate(BaseModel):
    """Create a pantry item."""

    name: str = Field(..., min_length=1, max_length=255)
    category: str | None = Field(None, max_length=100)
    quantity: float = Field(1, gt=0)
    unit: str | None = Field(None, max_length=50)
    expiry_date: date


class PantryItemUpdate(BaseModel):
    """Update a pantry item."""

    name: str | None = Field(None, min_length=1, max_length=255)
    category: str | None = None
    quantity: float | None = Field(None, gt=0)
    unit: str | None = None
    expiry_date: date | None = None


class PantryItemResponse(BaseModel):
    """Pantry item response with freshness derived for today."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    category: str | None
    quantity: float
    unit: str | None
    expiry_date: date
    added_date: date
    status: FreshnessStatus
    days_until_expiry: int
    expiry_text: str
    created_at: datetime
    updated_at: datetime


class PantryMutationResponse(BaseModel):
    """Result of adding or updating an item, plus the re-evaluated suggestions."""

    item: PantryItemResponse
    suggestions: SuggestionResponse


class PantryRemovalResponse(BaseModel):
    """Result of marking an item as used."""

    removed_id: int
    removed_name: str
    suggestions: SuggestionResponse


class PantryStatsResponse(BaseModel):
    """Counts shown on the dashboard cards."""

    total: int
    fresh: int
    expiring: int
    expired: int
    saved_percentage: int
    critical: int
    urgent_alert: bool
