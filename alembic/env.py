"""Alembic entry point for the marketplace schema.

Migrations are hand-written SQL (no ORM metadata, so no autogenerate). The
database URL comes from Settings; `alembic -x db_url=...` points a single run
at another database, e.g. a scratch copy for the integration suite.
"""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection

from config.settings import Settings, get_settings
from src.mp_common.database import create_engine

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _settings() -> Settings:
    settings = get_settings()
    override = context.get_x_argument(as_dictionary=True).get("db_url")
    if override:
        settings = settings.model_copy(update={"DATABASE_URL": override})
    return settings


def _migrate(**configure_kwargs: object) -> None:
    context.configure(target_metadata=None, **configure_kwargs)
    with context.begin_transaction():
        context.run_migrations()


def _migrate_on(connection: Connection) -> None:
    _migrate(connection=connection)


async def _migrate_online(settings: Settings) -> None:
    engine = create_engine(settings)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_migrate_on)
    finally:
        await engine.dispose()


def main() -> None:
    settings = _settings()
    if context.is_offline_mode():
        # emits SQL to stdout instead of executing it
        _migrate(
            url=settings.DATABASE_URL,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )
    else:
        asyncio.run(_migrate_online(settings))


main()
