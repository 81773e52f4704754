"""Session Identity — resolves a SessionContext to a live User row.

Invariants:
    - A session whose user row is missing is ended and treated as anonymous
    - Returns None for anonymous contexts without touching the database
"""

import logging

from app.core.errors import ResourceNotFoundError
from app.core.session_context import SessionContext, SessionRegistry
from app.models.user import User
from app.services.identity_store import IdentityStore

logger = logging.getLogger(__name__)


async def _require_user(context: SessionContext, identities: IdentityStore) -> User:
    user = await identities.get(context.user_id)
    if user is None:
        raise ResourceNotFoundError("User", str(context.user_name))
    return user


async def current_identity(
    context: SessionContext,
    registry: SessionRegistry,
    identities: IdentityStore,
) -> User | None:
    """The session's user, or None when anonymous."""
    if not context.is_authenticated:
        return None
    try:
        return await _require_user(context, identities)
    except ResourceNotFoundError as e:
        logger.warning(
            f"Stale session identity: {e.message}",
            extra={"user_name": context.user_name, "error_code": e.code},
        )
        registry.end(context)
        return None
