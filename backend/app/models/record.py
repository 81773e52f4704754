"""Record ORM — persists an append-only purchase/event entry.

Invariants:
    - id is an integer surrogate key; total order tie-breaker for every listing
    - payload is non-nullable text
    - category is nullable; exact-match filter column (indexed)
    - owner_id is a weak reference: nullable, SET NULL if the user ever disappears
    - Rows are never updated or deleted

Design Decisions:
    - Composite index on (timestamp, id): chronological listing walks the index
    - owner joined eagerly (selectin) so listings render owner names without N+1;
      one-directional: nothing walks from a User to its records
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Record(Base):
    """Record entity — a purchase or event, optionally owned by a user."""
    __tablename__ = "records"
    __table_args__ = (
        Index("ix_records_timestamp_id", "timestamp", "id"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    category: Mapped[str | None] = mapped_column(
        String(100), nullable=True, index=True,
    )
    owner_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True,
    )

    owner: Mapped[Optional["User"]] = relationship(
        "User", lazy="selectin",
    )
