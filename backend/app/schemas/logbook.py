"""Logbook Schemas — Pydantic models for the listing, login and create endpoints.

Invariants:
    - LoginRequest.name and RecordCreate.payload: stripped, non-empty (presence checks only)
    - RecordCreate.category: stripped, blank collapses to None
    - ListingResponse is built from ListingResult field by field (no reflection)

Design Decisions:
    - field_validator for side-effect-free transforms (strip) — keeps models pure
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from app.core.domain_types import ListingResult, RecordView
from app.core.paging import build_listing_url, normalize_category


class LoginRequest(BaseModel):
    """Login — a name is all it takes."""
    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class RecordCreate(BaseModel):
    """Record creation — payload text with optional category."""
    payload: str = Field(min_length=1, max_length=10_000)
    category: str | None = Field(None, max_length=100)

    @field_validator("payload")
    @classmethod
    def strip_payload(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("payload cannot be empty or whitespace")
        return v

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        return normalize_category(v)


class RecordResponse(BaseModel):
    """One listed record."""
    id: int
    payload: str
    timestamp: datetime
    category: str | None = None
    owner: str | None = None

    @classmethod
    def from_view(cls, view: RecordView) -> "RecordResponse":
        return cls(
            id=view.id,
            payload=view.payload,
            timestamp=view.timestamp,
            category=view.category,
            owner=view.owner_name,
        )


class ListingResponse(BaseModel):
    """Listing page as consumed by the rendering layer."""
    items: list[RecordResponse]
    page: int
    next_page: int
    has_next: bool
    category: str | None = None
    next_url: str | None = None
    identity: str | None = None

    @classmethod
    def from_result(
        cls, result: ListingResult, identity: str | None,
    ) -> "ListingResponse":
        next_url = (
            build_listing_url(result.filter, result.next_page_index)
            if result.has_next else None
        )
        return cls(
            items=[RecordResponse.from_view(v) for v in result.items],
            page=result.page_index,
            next_page=result.next_page_index,
            has_next=result.has_next,
            category=result.filter,
            next_url=next_url,
            identity=identity,
        )
