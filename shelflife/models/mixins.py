"""Column mixins shared by the models."""

from sqlalchemy import Column, DateTime, func


class CreatedAtMixin:
    """Insert time for append-only rows."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class TimestampMixin(CreatedAtMixin):
    """Insert time plus last-modified time for rows that are edited in place."""

    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
