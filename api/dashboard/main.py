import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .db import engine
from .routers import (
    auth_router,
    stats_router,
    color_router,
    channels_router,
    discord_router,
    maps_router,
    changelog_router,
)
from .services.discord import get_discord_service, init_discord_service
from .services.storage import get_storage_service, init_storage_service

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire up the optional collaborators from settings."""
    if settings.discord_configured:
        init_discord_service(
            settings.discord_bot_token,
            api_url=settings.discord_api_url,
            timeout=settings.http_timeout_seconds,
        )
    else:
        logger.warning("DISCORD_BOT_TOKEN is not set. Discord endpoints will return 503.")

    if settings.storage_configured:
        init_storage_service(
            settings.supabase_url,
            settings.supabase_key,
            bucket=settings.maps_bucket,
            folder=settings.maps_folder,
            timeout=settings.http_timeout_seconds,
        )
    else:
        logger.warning("SUPABASE_URL or SUPABASE_KEY is not set. Map endpoints will return 503.")

    if engine is None:
        logger.warning("DATABASE_URL is not set. Stats fall back to an empty timeline.")

    logger.info(f"Dashboard API ready on {settings.api_host}:{settings.api_port}")
    yield


app = FastAPI(
    title="Server Analytics Dashboard API",
    description="Analytics, Discord tools, map hosting and changelog for the community dashboard",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(stats_router, prefix="/api")
app.include_router(color_router, prefix="/api")
app.include_router(channels_router, prefix="/api")
app.include_router(discord_router, prefix="/api")
app.include_router(maps_router, prefix="/api")
app.include_router(changelog_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "discord": get_discord_service() is not None,
        "database": engine is not None,
        "storage": get_storage_service() is not None,
        "changelog": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def run():
    """Console entrypoint: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
