"""
Alembic Migration Environment
===============================

What:  Runs the routes-table migrations against the configured store.
How:   The URL comes from `alembic -x database_url=...` when given, else from
       app settings (DATABASE_URL). Online runs go through an async engine;
       offline runs (`--sql`) print the DDL instead.

Usage:
    alembic upgrade head
    alembic -x database_url=sqlite+aiosqlite:///./naviga8.db upgrade head
    alembic upgrade head --sql
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from app.config import settings
from app.database import Base

# Registers the routes table on Base.metadata for --autogenerate
from app.models import route  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("database_url") or settings.database_url


def _configure(database_url: str, **kwargs) -> None:
    # SQLite cannot ALTER most constraints in place; batch mode rebuilds the table
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=make_url(database_url).get_backend_name() == "sqlite",
        **kwargs,
    )


def run_migrations_offline() -> None:
    database_url = _database_url()
    _configure(
        database_url,
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    database_url = _database_url()
    engine = create_async_engine(database_url, poolclass=pool.NullPool)

    def migrate(connection) -> None:
        _configure(database_url, connection=connection)
        with context.begin_transaction():
            context.run_migrations()

    try:
        async with engine.connect() as connection:
            await connection.run_sync(migrate)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
