"""Main application entry point."""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

# Configure logging FIRST, before any other imports
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

# Reduce noise from third-party libraries (must be set before importing them)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from app.api import router
from app.config import get_settings
from app.metrics_config import load_metrics_config
from app.services import (
    RefreshScheduler,
    SignalService,
    WebhookNotifier,
    build_sources,
    default_cadences,
)
from app.storage import HistoryRepository, cache
from core.scoring import check_weight_tables

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).parent.parent


def _resolve_config_path(value: str) -> Path:
    path = Path(value)
    return path if path.is_absolute() else BACKEND_DIR / path


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting signal engine...")

    # Weight tables and metric config are fatal at startup
    check_weight_tables()
    settings = get_settings()
    metrics_config = load_metrics_config(_resolve_config_path(settings.metrics_config_path))

    # Initialize Redis cache with timeout
    try:
        await asyncio.wait_for(cache.init_cache(), timeout=10)
        if cache.is_cache_available():
            logger.info("Redis cache initialized")
        else:
            logger.warning("Redis cache unavailable - running without persistence")
    except asyncio.TimeoutError:
        logger.warning("Redis cache initialization timed out - running without persistence")

    engine_config = settings.engine_config()
    sources = build_sources(
        metrics_config,
        fetch_timeout=settings.fetch_timeout_seconds,
        price_seconds=settings.price_refresh_seconds,
        sentiment_seconds=settings.sentiment_refresh_seconds,
        slow_seconds=settings.money_supply_refresh_seconds,
    )
    service = SignalService(
        sources=sources,
        history=HistoryRepository(config=engine_config),
        notifier=WebhookNotifier(settings.notify_webhook_url, settings.notify_recipient),
        config=engine_config,
    )
    await service.load_state()
    app.state.signal_service = service

    # First cycle right away, then on the refresh cadences
    await service.run_cycle()

    scheduler: RefreshScheduler | None = None
    if settings.auto_refresh:
        scheduler = RefreshScheduler(
            service,
            default_cadences(
                settings.price_refresh_seconds,
                settings.sentiment_refresh_seconds,
                settings.money_supply_refresh_seconds,
            ),
        )
        scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down...")

    if scheduler:
        await scheduler.stop()

    app.state.signal_service = None
    await service.close()

    # Close Redis cache
    await cache.close_cache()

    logger.info("Shutdown complete")


# Create FastAPI app with orjson for faster JSON serialization
app = FastAPI(
    title="BTC Signal Engine",
    description="Indicator scoring and trading signals for Bitcoin",
    version="0.1.0",
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include REST routes
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "BTC Signal Engine",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


def main():
    """Run the application."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
