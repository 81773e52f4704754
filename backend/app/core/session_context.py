"""Session Context — per-client ephemeral identity keyed by an opaque token.

Invariants:
    - A context holds at most one identity (user_id + user_name)
    - Unknown or missing tokens resolve to a fresh anonymous context that is NOT registered
    - end() drops the whole registry entry: token and identity are both gone
    - start() always issues a new token (the pre-login token is discarded)

Design Decisions:
    - Registry is an in-process dict: sessions are not persisted beyond process lifetime
      (ADR: single-process uvicorn, same trade-off as any in-memory state)
    - Context is an explicit object injected into handlers by a FastAPI dependency;
      stores and services never look identity up on their own
"""

import logging
import secrets
from dataclasses import dataclass

from app.core.domain_types import UserId

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """Per-client state for the current request."""
    token: str | None = None
    user_id: UserId | None = None
    user_name: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def identity(self) -> str | None:
        return self.user_name

    def login(self, user_id: UserId, user_name: str) -> None:
        self.user_id = user_id
        self.user_name = user_name

    def logout(self) -> None:
        self.user_id = None
        self.user_name = None


class SessionRegistry:
    """Maps opaque client tokens to their SessionContext."""

    def __init__(self) -> None:
        self._contexts: dict[str, SessionContext] = {}

    def __len__(self) -> int:
        return len(self._contexts)

    def __contains__(self, token: object) -> bool:
        return token in self._contexts

    def resolve(self, token: str | None) -> SessionContext:
        """Return the registered context for token, or a new anonymous one."""
        if token and token in self._contexts:
            return self._contexts[token]
        return SessionContext()

    def start(self, context: SessionContext, user_id: UserId, user_name: str) -> SessionContext:
        """Bind an identity under a freshly issued token."""
        if context.token:
            self._contexts.pop(context.token, None)
        context.login(user_id, user_name)
        context.token = secrets.token_urlsafe(32)
        self._contexts[context.token] = context
        logger.info("Session started", extra={"user_name": user_name})
        return context

    def end(self, context: SessionContext) -> None:
        """Invalidate the entire per-client context."""
        if context.token:
            self._contexts.pop(context.token, None)
        user_name = context.user_name
        context.logout()
        context.token = None
        if user_name:
            logger.info("Session ended", extra={"user_name": user_name})
