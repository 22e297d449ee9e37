"""Alembic environment — applies the users/tasks schema with the app's own settings.

Invariants:
    - The migration URL is Settings.database_url: same env var, same .env file and the
      same postgresql:// → postgresql+asyncpg:// rewrite as the running service
    - taskvault.models is imported so Base.metadata holds both tables before autogenerate
    - Online runs use a NullPool engine: a migration never borrows from the service pool
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

from taskvault.config import get_settings
from taskvault.db.base import Base
import taskvault.models  # noqa: F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# configparser interpolates %, and URL-encoded passwords contain it
config.set_main_option(
    "sqlalchemy.url", get_settings().database_url.replace("%", "%%"),
)
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL for the schema without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _apply(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    async with connectable.connect() as connection:
        await connection.run_sync(_apply)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
