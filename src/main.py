"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import Settings, get_settings
from src.mp_common.database import create_engine, create_session_factory
from src.mp_common.errors import AppError
from src.mp_common.response import error_response
from src.mp_gateway.middleware.request_log import RequestLogMiddleware
from src.mp_ledger.application.service import LedgerService
from src.mp_listing.infrastructure.persistence import ListingRepository
from src.mp_order.api.router import router as order_router
from src.mp_order.application.lifecycle import OrderLifecycleService
from src.mp_order.application.service import OrderService
from src.mp_order.infrastructure.persistence import OrderRepository
from src.mp_user.application.guard import UserStandingGuard

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the pool."""
    engine = app.state.engine
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("Database connection verified")
    yield
    await engine.dispose()


def create_app(settings: Settings) -> FastAPI:
    """Build the app and every service from `settings`; nothing is global."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = FastAPI(title=settings.APP_NAME, version=VERSION, lifespan=lifespan)

    engine = create_engine(settings)
    session_factory = create_session_factory(engine)
    listings = ListingRepository()
    orders = OrderRepository()
    ledger = LedgerService(logger=logging.getLogger("mp.ledger"))

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.order_service = OrderService(
        session_factory,
        listings=listings,
        standing=UserStandingGuard(),
        orders=orders,
        ledger=ledger,
        logger=logging.getLogger("mp.order"),
    )
    app.state.lifecycle_service = OrderLifecycleService(
        session_factory,
        orders=orders,
        listings=listings,
        ledger=ledger,
        seller_response_hours=settings.SELLER_RESPONSE_HOURS,
        review_window_hours=settings.REVIEW_WINDOW_HOURS,
        logger=logging.getLogger("mp.order.lifecycle"),
    )

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(exc.code, exc.message, request)
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(order_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    return app


app = create_app(get_settings())
