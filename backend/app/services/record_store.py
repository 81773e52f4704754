"""Record Store — append-only record persistence with filtered offset paging.

Invariants:
    - append() is a single INSERT + COMMIT: a record is fully written or not at all
    - page() fetches page_size + 1 rows; the extra row only decides has_next
    - Every ordering ends on Record.id, so offsets over a stable collection never
      skip or duplicate a row
    - category filter is exact match; None means no filter
    - An offset past MAX_OFFSET is an empty last page, never a database error

Design Decisions:
    - Thin class around an AsyncSession (one per request, injected by the route)
    - SQLAlchemy failures are not caught here: DatabaseSessionManager maps them
      to StoreUnavailableError after rollback
    - populate_existing on page(): rows appended through this session are reloaded
      with their owner instead of served stale from the identity map
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import RecordId, RecordOrder, RecordPage, RecordView, UserId
from app.core.errors import ErrorContext, InvalidArgumentError
from app.models.record import Record

logger = logging.getLogger(__name__)

# Largest OFFSET a signed 64-bit database integer can hold
MAX_OFFSET = 2**63 - 1

_ORDERINGS = {
    RecordOrder.TIMESTAMP_DESC: (Record.timestamp.desc(), Record.id.desc()),
    RecordOrder.ID_ASC: (Record.id.asc(),),
}


def _to_view(record: Record) -> RecordView:
    return RecordView(
        id=RecordId(record.id),
        payload=record.payload,
        timestamp=record.timestamp,
        category=record.category,
        owner_name=record.owner.name if record.owner else None,
    )


class RecordStore:
    """Durable ordered collection of immutable records."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def append(
        self,
        payload: str,
        category: str | None = None,
        owner_id: UserId | None = None,
        timestamp: datetime | None = None,
    ) -> RecordId:
        """Append one record and return its id."""
        record = Record(
            payload=payload,
            category=category,
            owner_id=owner_id,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        self._db.add(record)
        await self._db.commit()
        logger.info(
            "Record appended",
            extra={"record_id": record.id, "category": category},
        )
        return RecordId(record.id)

    async def page(
        self,
        category: str | None,
        page_index: int,
        page_size: int,
        order: RecordOrder = RecordOrder.TIMESTAMP_DESC,
    ) -> RecordPage:
        """Records at offsets page_index*page_size .. +page_size-1 in the given order."""
        if page_size <= 0:
            raise InvalidArgumentError(
                f"page_size must be positive, got {page_size}", "page_size",
                context=ErrorContext(category=category, page=page_index),
            )
        if page_index < 0:
            raise InvalidArgumentError(
                f"page_index must be non-negative, got {page_index}", "page_index",
                context=ErrorContext(category=category, page=page_index),
            )

        offset = page_index * page_size
        if offset > MAX_OFFSET:
            return RecordPage()

        query = select(Record)
        if category is not None:
            query = query.where(Record.category == category)
        query = (
            query.order_by(*_ORDERINGS[order])
            .offset(offset)
            .limit(page_size + 1)
            .execution_options(populate_existing=True)
        )
        result = await self._db.execute(query)
        rows = result.scalars().all()

        return RecordPage(
            items=[_to_view(r) for r in rows[:page_size]],
            has_next=len(rows) > page_size,
        )

    async def count(self, category: str | None = None) -> int:
        query = select(func.count()).select_from(Record)
        if category is not None:
            query = query.where(Record.category == category)
        result = await self._db.execute(query)
        return result.scalar_one()
