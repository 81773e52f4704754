"""User ORM — persists an identity keyed by its unique name.

Invariants:
    - id is an integer surrogate key (autoincrement)
    - name is unique across the table (DB-level constraint)
    - Rows are never mutated or deleted

Design Decisions:
    - Uniqueness enforced by the database, not by check-then-insert: the
      IdentityStore relies on the IntegrityError to resolve login races
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class User(Base):
    """Identity — created on first login with an unseen name."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(
        String(200), nullable=False, unique=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
