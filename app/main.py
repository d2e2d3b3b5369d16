# app/main.py

from contextlib import asynccontextmanager
import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import APP_ENV, PORT, CORS_ORIGINS
from app.logging_setup import configure_logging
from app.routers import health, voices
from app.services.cache_factory import get_cache_service

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: open the cache connection (failures are logged, the app still starts)
    logger.info("Starting voice service (environment=%s, port=%s)", APP_ENV, PORT)
    cache = get_cache_service()
    await cache.connect()
    try:
        yield
    finally:
        # Shutdown: release the cache connection
        logger.info("Shutting down gracefully...")
        await cache.disconnect()


app = FastAPI(
    title="Voice Service API",
    description="Voice management and health endpoints",
    version="1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "voices", "description": "Voice management endpoints"},
        {"name": "health", "description": "Liveness and dependency checks"},
    ],
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.router)
app.include_router(voices.router)


def run() -> None:
    """Serve the app on PORT at 0.0.0.0 (console script `voice-service`)."""
    uvicorn.run(app, host="0.0.0.0", port=PORT, log_config=None)


if __name__ == "__main__":
    run()
