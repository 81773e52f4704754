"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - User owns zero or more Records; a Record has at most one owner

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs (ADR: standard SQLAlchemy pattern)
"""

from app.models.user import User  # noqa: F401
from app.models.record import Record  # noqa: F401
