"""Logbook Routes — listing, login, logout and record creation.

Invariants:
    - Identity only ever comes from the SessionContext dependency (cookie token)
    - Listing: malformed/negative page -> 0, blank category -> no filter, unknown category -> empty page
    - POST routes always answer 303 to the listing; /create threads its category into the redirect
    - Anonymous /create appends nothing and still redirects

Design Decisions:
    - Routes build stores per request from the injected AsyncSession (no globals below the handler)
    - SessionRegistry lives on app.state: one per process, reachable only through get_session_registry
    - Page parsed from a raw string so garbage never turns into a 400
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.domain_types import UserId
from app.core.paging import build_listing_url, normalize_category, parse_page_index
from app.core.session_context import SessionContext, SessionRegistry
from app.infrastructure.database import get_db
from app.schemas.logbook import ListingResponse, LoginRequest, RecordCreate
from app.services.identity_store import IdentityStore
from app.services.listing_service import ListingService
from app.services.record_store import RecordStore
from app.services.session_identity import current_identity

logger = logging.getLogger(__name__)
router = APIRouter(tags=["logbook"])


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def get_session_context(
    request: Request,
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
) -> SessionContext:
    """Per-request context resolved from the session cookie."""
    return registry.resolve(request.cookies.get(settings.session_cookie_name))


def _redirect_to_listing(category: str | None = None) -> RedirectResponse:
    return RedirectResponse(
        build_listing_url(category), status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/", response_model=ListingResponse)
async def list_records(
    category: str | None = Query(None),
    page: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
):
    """One page of records, newest first, optionally filtered by category."""
    category = normalize_category(category)
    page_index = parse_page_index(page)
    user = await current_identity(context, registry, IdentityStore(db))
    listing = ListingService(
        RecordStore(db), settings.listing_page_size, settings.listing_order,
    )
    result = await listing.list(category, page_index)
    return ListingResponse.from_result(result, user.name if user else None)


@router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
):
    """Reuse or create the named user and bind it to a fresh session."""
    result = await IdentityStore(db).get_or_create(body.name)
    registry.start(context, result.user_id, result.user_name)
    response = _redirect_to_listing()
    response.set_cookie(
        settings.session_cookie_name,
        context.token,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.post("/logout")
async def logout(
    context: SessionContext = Depends(get_session_context),
    registry: SessionRegistry = Depends(get_session_registry),
    settings: Settings = Depends(get_settings),
):
    """Drop the whole session and forget the cookie."""
    registry.end(context)
    response = _redirect_to_listing()
    response.delete_cookie(settings.session_cookie_name)
    return response


@router.post("/create")
async def create_record(
    body: RecordCreate,
    db: AsyncSession = Depends(get_db),
    context: SessionContext = Depends(get_session_context),
    registry: SessionRegistry = Depends(get_session_registry),
):
    """Append a record owned by the session user; anonymous requests are ignored."""
    user = await current_identity(context, registry, IdentityStore(db))
    if user is None:
        logger.info(
            "Anonymous create ignored", extra={"category": body.category},
        )
        return _redirect_to_listing(body.category)

    await RecordStore(db).append(
        body.payload, category=body.category, owner_id=UserId(user.id),
    )
    return _redirect_to_listing(body.category)
