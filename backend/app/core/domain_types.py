"""Domain Types — rich types and result structures shared by stores, services and routes.

Invariants:
    - UserId, RecordId wrap integer surrogate keys — never use bare int in domain logic
    - All orderings encoded as Enums — no raw string matching
    - Result structures are frozen: renderers read fields, never mutate them

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - Explicit result dataclasses (ListingResult, LoginResult) over dynamic attribute
      binding: the rendering layer consumes named fields only
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
RecordId = NewType("RecordId", int)


# ─── Enums ───────────────────────────────────────────────────────

class RecordOrder(str, Enum):
    """Total orderings supported by RecordStore.page. Both end on a unique key."""
    TIMESTAMP_DESC = "timestamp_desc"
    ID_ASC = "id_asc"


# ─── Result Structures ───────────────────────────────────────────

@dataclass(frozen=True)
class RecordView:
    """One listed record with its owner's name resolved."""
    id: RecordId
    payload: str
    timestamp: datetime
    category: str | None
    owner_name: str | None


@dataclass(frozen=True)
class RecordPage:
    """A bounded slice of the ordered record collection."""
    items: list[RecordView] = field(default_factory=list)
    has_next: bool = False


@dataclass(frozen=True)
class ListingResult:
    """Listing page plus the metadata needed to render "Next"."""
    items: list[RecordView]
    page_index: int
    next_page_index: int
    has_next: bool
    filter: str | None


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login: the resolved user and whether it was just created."""
    user_id: UserId
    user_name: str
    created: bool
