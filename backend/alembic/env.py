"""Alembic environment — migrates the users/records schema with the app's async engine.

The database URL comes from app settings, so DATABASE_URL and .env apply
exactly as they do for the running API.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from app.config import get_settings
from app.db.base import Base
import app.models  # noqa: F401  (registers users and records on Base.metadata)

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online(url: str) -> None:
    engine = create_async_engine(url, poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(lambda conn: _configure(connection=conn))
    await engine.dispose()


url = get_settings().database_url
if context.is_offline_mode():
    _configure(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(_migrate_online(url))
