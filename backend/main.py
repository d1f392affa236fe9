"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api import auth, prices, simulation, wallet
from api.dependencies import get_price_provider_client, get_price_service
from api.errors import register_exception_handlers
from config import settings
from database import get_session_local
from logging_config import setup_logging
from services.price_refresh_scheduler import PriceRefreshScheduler

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the background price refresh for the lifetime of the app."""
    scheduler = None
    if settings.PRICE_REFRESH_ENABLED:
        scheduler = PriceRefreshScheduler(
            price_service=get_price_service(),
            session_factory=get_session_local(),
            concurrency=settings.PRICE_REFRESH_CONCURRENCY,
            interval_seconds=settings.PRICE_REFRESH_INTERVAL_MS / 1000,
        )
        scheduler.start()
    else:
        logger.info("Price refresh disabled")
    app.state.price_refresh_scheduler = scheduler
    try:
        yield
    finally:
        if scheduler is not None:
            scheduler.stop(timeout=5)
        get_price_provider_client().close()


app = FastAPI(
    title="Crypto Wallet",
    description="Crypto wallet tracking and historical portfolio simulation",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Include API routers
app.include_router(auth.router)
app.include_router(wallet.router)
app.include_router(simulation.router)
app.include_router(prices.router)


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}
