"""Freshness classification and urgency banding for pantry items.

Every function here works on calendar dates. Callers turn "now" into a date
once, with :func:`today_in_timezone`, and pass that date down, so the pantry
listing, the stats cards and the recipe trigger all agree on what "today" is.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Generic, Protocol, TypeVar
from zoneinfo import ZoneInfo

from shelflife.models.enums import FreshnessStatus

EXPIRING_WINDOW_DAYS = 3
CRITICAL_WINDOW_DAYS = 1


class HasExpiry(Protocol):
    """Anything with a name and an expiry date (ORM rows, schemas, test doubles)."""

    name: str
    expiry_date: date


ItemT = TypeVar("ItemT", bound=HasExpiry)


def today_in_timezone(tz_name: str = "UTC", now: datetime | None = None) -> date:
    """Return the calendar date of ``now`` (default: current time) in ``tz_name``."""
    tz = ZoneInfo(tz_name)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        return now.date()
    return now.astimezone(tz).date()


def days_until_expiry(expiry_date: date, today: date) -> int:
    """Whole days from ``today`` to ``expiry_date``; negative once expired."""
    return (expiry_date - today).days


def classify(expiry_date: date, today: date) -> FreshnessStatus:
    """Classify an expiry date as fresh, expiring or expired."""
    days = days_until_expiry(expiry_date, today)
    if days < 0:
        return FreshnessStatus.EXPIRED
    if days <= EXPIRING_WINDOW_DAYS:
        return FreshnessStatus.EXPIRING
    return FreshnessStatus.FRESH


def describe_expiry(days: int, status: FreshnessStatus) -> str:
    """Human readable expiry text shown next to an item."""
    if status == FreshnessStatus.EXPIRED:
        ago = abs(days)
        return f"Expired {ago} day{'' if ago == 1 else 's'} ago"
    if days == 0:
        return "Expires today!"
    if days == 1:
        return "Expires tomorrow"
    return f"Expires in {days} days"


@dataclass
class UrgencyBands(Generic[ItemT]):
    """Pantry items split by how soon they must be used.

    ``critical`` holds anything expiring today or tomorrow, including items
    that are already past their date. ``expiring`` holds items due in two or
    three days. Everything else is ``stable``.
    """

    critical: list[ItemT] = field(default_factory=list)
    expiring: list[ItemT] = field(default_factory=list)
    stable: list[ItemT] = field(default_factory=list)

    @property
    def urgent(self) -> list[ItemT]:
        return [*self.critical, *self.expiring]

    @property
    def urgent_names(self) -> frozenset[str]:
        return frozenset(item.name for item in self.urgent)


def partition(items: Iterable[ItemT], today: date) -> UrgencyBands[ItemT]:
    """Split items into critical, expiring and stable bands."""
    bands: UrgencyBands[ItemT] = UrgencyBands()
    for item in items:
        days = days_until_expiry(item.expiry_date, today)
        if days <= CRITICAL_WINDOW_DAYS:
            bands.critical.append(item)
        elif days <= EXPIRING_WINDOW_DAYS:
            bands.expiring.append(item)
        else:
            bands.stable.append(item)
    return bands


def sort_by_urgency(items: Sequence[ItemT], today: date) -> list[ItemT]:
    """Order items expired first, then expiring, then fresh, soonest date first."""
    return sorted(
        items,
        key=lambda item: (
            classify(item.expiry_date, today).sort_order,
            item.expiry_date,
            item.name.lower(),
        ),
    )
