"""Shared fixtures: in-memory store, services wired to it, HTTP client."""

from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.mp_gateway.auth.jwt_handler import create_access_token
from src.mp_ledger.application.service import LedgerService
from src.mp_order.application.lifecycle import OrderLifecycleService
from src.mp_order.application.service import OrderService
from src.mp_user.application.guard import UserStandingGuard
from tests.unit.fakes import (
    FakeLedgerRepository,
    FakeListingRepository,
    FakeOrderRepository,
    FakeStore,
    FakeUserRepository,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def ledger_service(store: FakeStore) -> LedgerService:
    return LedgerService(repo=FakeLedgerRepository(store))


@pytest.fixture
def order_service(store: FakeStore, ledger_service: LedgerService) -> OrderService:
    return OrderService(
        store.session_factory,  # type: ignore[arg-type]
        listings=FakeListingRepository(store),
        standing=UserStandingGuard(repo=FakeUserRepository(store)),
        orders=FakeOrderRepository(store),
        ledger=ledger_service,
    )


@pytest.fixture
def lifecycle_service(store: FakeStore, ledger_service: LedgerService) -> OrderLifecycleService:
    return OrderLifecycleService(
        store.session_factory,  # type: ignore[arg-type]
        orders=FakeOrderRepository(store),
        listings=FakeListingRepository(store),
        ledger=ledger_service,
        seller_response_hours=48,
        review_window_hours=72,
    )


@pytest.fixture
def seller_id(store: FakeStore) -> str:
    return store.add_user()


@pytest.fixture
def buyer_id(store: FakeStore) -> str:
    return store.add_user()


@pytest.fixture
def listing_id(store: FakeStore, seller_id: str) -> str:
    """Quantity 3 at 10.00."""
    return store.add_listing(seller_id, price_cents=1000, quantity=3)


@pytest.fixture
def auth_headers(settings: Settings) -> Callable[..., dict[str, str]]:
    def _headers(user_id: str, role: str | None = None) -> dict[str, str]:
        token = create_access_token(
            user_id, settings.JWT_SECRET, settings.JWT_ALGORITHM, role=role
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client(
    settings: Settings,
    order_service: OrderService,
    lifecycle_service: OrderLifecycleService,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the real app, services wired to the fake store."""
    from src.main import create_app

    app = create_app(settings)
    app.state.order_service = order_service
    app.state.lifecycle_service = lifecycle_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
