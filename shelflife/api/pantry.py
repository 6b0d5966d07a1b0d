"""Pantry API endpoints.

Adding, updating and removing items each re-evaluate the recipe trigger in
the same request, so the response always carries up-to-date suggestions.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shelflife.api.dependencies import get_current_user, get_suggestion_service
from shelflife.database import get_db
from shelflife.models.enums import FreshnessStatus
from shelflife.models.pantry import PantryItem
from shelflife.models.user import User
from shelflife.schemas.pantry import (
    PantryItemCreate,
    PantryItemResponse,
    PantryItemUpdate,
    PantryMutationResponse,
    PantryRemovalResponse,
    PantryStatsResponse,
)
from shelflife.schemas.recipe import SuggestionResponse
from shelflife.schemas.user import UserProfile
from shelflife.services.freshness import (
    classify,
    days_until_expiry,
    describe_expiry,
    partition,
    sort_by_urgency,
)
from shelflife.services.persistence import PersistenceError
from shelflife.services.suggestions import RecipeSuggestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/pantry", tags=["pantry"])


def get_user_pantry_item(db: Session, item_id: int, user: User) -> PantryItem:
    """Get a pantry item that belongs to the user."""
    item = (
        db.query(PantryItem)
        .filter(
            PantryItem.id == item_id,
            PantryItem.user_id == user.id,
        )
        .first()
    )
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pantry item not found")
    return item


def to_item_response(item: PantryItem, today) -> PantryItemResponse:
    """Build the response for an item with freshness derived for ``today``."""
    days = days_until_expiry(item.expiry_date, today)
    item_status = classify(item.expiry_date, today)
    return PantryItemResponse(
        id=item.id,
        user_id=item.user_id,
        name=item.name,
        category=item.category,
        quantity=item.quantity,
        unit=item.unit,
        expiry_date=item.expiry_date,
        added_date=item.added_date,
        status=item_status,
        days_until_expiry=days,
        expiry_text=describe_expiry(days, item_status),
        created_at=item.created_at,
        updated_at=item.updated_at,
    )


def commit_or_500(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save pantry item",
        ) from None


async def reevaluate(
    service: RecipeSuggestionService,
    user: User,
) -> SuggestionResponse:
    """Suggestions after a committed mutation; storage errors yield no suggestions."""
    try:
        return await service.evaluate_and_maybe_generate(
            user.id, profile=UserProfile.from_user(user)
        )
    except PersistenceError as e:
        logger.error(f"Could not re-evaluate suggestions for user {user.id}: {e}")
        return SuggestionResponse(recipes=[], source=None, generated=False)


@router.get("", response_model=list[PantryItemResponse])
def list_pantry_items(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """List pantry items, expired first, then expiring, then fresh."""
    today = service.today()
    items = db.query(PantryItem).filter(PantryItem.user_id == current_user.id).all()
    return [to_item_response(item, today) for item in sort_by_urgency(items, today)]


@router.get("/stats", response_model=PantryStatsResponse)
def get_pantry_stats(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Counts per freshness status and the share of items still fresh."""
    today = service.today()
    items = db.query(PantryItem).filter(PantryItem.user_id == current_user.id).all()

    counts = dict.fromkeys(FreshnessStatus, 0)
    for item in items:
        counts[classify(item.expiry_date, today)] += 1

    total = len(items)
    fresh = counts[FreshnessStatus.FRESH]
    critical = len(partition(items, today).critical)
    return PantryStatsResponse(
        total=total,
        fresh=fresh,
        expiring=counts[FreshnessStatus.EXPIRING],
        expired=counts[FreshnessStatus.EXPIRED],
        saved_percentage=round(fresh / total * 100) if total else 0,
        critical=critical,
        urgent_alert=critical >= 1,
    )


@router.post("", response_model=PantryMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_pantry_item(
    item_data: PantryItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Add an item to the pantry and re-evaluate recipe suggestions."""
    today = service.today()
    item = PantryItem(
        user_id=current_user.id,
        name=item_data.name.strip(),
        category=item_data.category,
        quantity=item_data.quantity,
        unit=item_data.unit,
        expiry_date=item_data.expiry_date,
        added_date=today,
    )
    db.add(item)
    commit_or_500(db)
    db.refresh(item)

    suggestions = await reevaluate(service, current_user)
    return PantryMutationResponse(item=to_item_response(item, today), suggestions=suggestions)


@router.get("/{item_id}", response_model=PantryItemResponse)
def get_pantry_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Get a specific pantry item."""
    item = get_user_pantry_item(db, item_id, current_user)
    return to_item_response(item, service.today())


@router.put("/{item_id}", response_model=PantryMutationResponse)
async def update_pantry_item(
    item_id: int,
    item_data: PantryItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Update a pantry item and re-evaluate recipe suggestions."""
    item = get_user_pantry_item(db, item_id, current_user)

    if item_data.name is not None:
        item.name = item_data.name.strip()
    if item_data.category is not None:
        item.category = item_data.category if item_data.category else None
    if item_data.quantity is not None:
        item.quantity = item_data.quantity
    if item_data.unit is not None:
        item.unit = item_data.unit if item_data.unit else None
    if item_data.expiry_date is not None:
        item.expiry_date = item_data.expiry_date

    commit_or_500(db)
    db.refresh(item)

    suggestions = await reevaluate(service, current_user)
    return PantryMutationResponse(
        item=to_item_response(item, service.today()), suggestions=suggestions
    )


@router.delete("/{item_id}", response_model=PantryRemovalResponse)
async def mark_pantry_item_used(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    service: Annotated[RecipeSuggestionService, Depends(get_suggestion_service)],
):
    """Mark an item as used: delete it and re-evaluate recipe suggestions."""
    item = get_user_pantry_item(db, item_id, current_user)
    removed_name = item.name
    db.delete(item)
    commit_or_500(db)

    suggestions = await reevaluate(service, current_user)
    return PantryRemovalResponse(
        removed_id=item_id, removed_name=removed_name, suggestions=suggestions
    )
