"""Identity Store — users keyed by unique name, with race-safe login.

Invariants:
    - create() raises ConflictError on a duplicate name and leaves the session usable
    - get_or_create() never raises ConflictError: a lost race returns the winner's row
    - At most one User per name ever exists (DB unique constraint is the arbiter)

Design Decisions:
    - Check-then-create with conflict recovery over SELECT ... FOR UPDATE:
      portable across SQLite and PostgreSQL, the race is benign
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import LoginResult, UserId
from app.core.errors import ConflictError, ResourceNotFoundError
from app.models.user import User

logger = logging.getLogger(__name__)


class IdentityStore:
    """Durable collection of users keyed by name."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def find_by_name(self, name: str) -> User | None:
        result = await self._db.execute(select(User).where(User.name == name))
        return result.scalar_one_or_none()

    async def get(self, user_id: UserId) -> User | None:
        result = await self._db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def create(self, name: str) -> User:
        """Insert a new user. Raises ConflictError if the name is taken."""
        user = User(name=name)
        self._db.add(user)
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise ConflictError("User", name)
        logger.info("User created", extra={"user_name": name})
        return user

    async def get_or_create(self, name: str) -> LoginResult:
        """Login lookup: reuse the user with this name or create exactly one."""
        user = await self.find_by_name(name)
        if user:
            return LoginResult(UserId(user.id), user.name, created=False)
        try:
            user = await self.create(name)
        except ConflictError:
            # Lost the race to a concurrent login with the same name
            user = await self.find_by_name(name)
            if user is None:
                raise ResourceNotFoundError("User", name)
            logger.info("Login race resolved", extra={"user_name": name})
            return LoginResult(UserId(user.id), user.name, created=False)
        return LoginResult(UserId(user.id), user.name, created=True)

    async def count(self) -> int:
        result = await self._db.execute(select(func.count()).select_from(User))
        return result.scalar_one()
