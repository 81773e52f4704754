"""Listing Service — one page of records plus the metadata to render "Next".

Invariants:
    - next_page_index == page_index + 1, always
    - has_next forwarded unchanged from RecordStore.page
    - filter echoed back unchanged so the caller threads it into every next-page link
    - No pagination state kept between calls: safe to share across clients

Design Decisions:
    - page_size and order fixed at construction (from settings); page and filter per call
"""

from app.core.domain_types import ListingResult, RecordOrder
from app.services.record_store import RecordStore


class ListingService:
    """Stateless paging facade over RecordStore."""

    def __init__(
        self,
        records: RecordStore,
        page_size: int,
        order: RecordOrder = RecordOrder.TIMESTAMP_DESC,
    ):
        self._records = records
        self._page_size = page_size
        self._order = order

    async def list(
        self, category: str | None = None, page_index: int = 0,
    ) -> ListingResult:
        page = await self._records.page(
            category, page_index, self._page_size, self._order,
        )
        return ListingResult(
            items=page.items,
            page_index=page_index,
            next_page_index=page_index + 1,
            has_next=page.has_next,
            filter=category,
        )
