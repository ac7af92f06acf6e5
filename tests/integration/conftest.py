"""Integration-test fixtures.

Requires a running PostgreSQL with migrations applied (alembic upgrade head);
the whole directory is skipped when DATABASE_URL is unreachable. All tests
share one event loop so the engine pool stays valid for the session.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from config.settings import get_settings
from src.mp_common.database import create_engine, create_session_factory
from src.mp_common.unit_of_work import SessionFactory


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(get_settings())
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1 FROM ledger_entries LIMIT 1"))
    except Exception as exc:  # noqa: BLE001 - any connect/schema failure means "no DB"
        await engine.dispose()
        pytest.skip(f"migrated PostgreSQL not available: {type(exc).__name__}")
    yield engine
    await engine.dispose()


@pytest.fixture(scope="session")
def session_factory(engine: AsyncEngine) -> SessionFactory:
    return create_session_factory(engine)

