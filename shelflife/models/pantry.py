"""Pantry item model for tracking perishable food at home."""

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from shelflife.database import Base
from shelflife.models.mixins import TimestampMixin


class PantryItem(Base, TimestampMixin):
    """Perishable item the user has at home.

    Freshness is not stored: it depends on today's date and is derived from
    ``expiry_date`` every time the item is read.
    """

    __tablename__ = "pantry_items"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)  # Display name, also the trigger-set key
    category = Column(String(100), nullable=True)  # "Dairy", "Produce", ...
    quantity = Column(Float, nullable=False, default=1)
    unit = Column(String(50), nullable=True)  # "carton", "bag", "cups"
    expiry_date = Column(Date, nullable=False, index=True)
    added_date = Column(Date, nullable=False)

    # Relationships
    user = relationship("User", backref="pantry_items")
