"""ShelfLife pantry tracker with expiry-driven recipe suggestions."""

__version__ = "0.1.0"
