"""Health check endpoint."""

import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends
from sqlalchemy import text

from storefront.core.config import settings
from storefront.db.session import engine
from storefront.themes.loader import ThemeLoader, get_theme_loader

logger = logging.getLogger(__name__)

router = APIRouter()

VERSION = "0.1.0"


@router.get("/health")
async def health_check(loader: ThemeLoader = Depends(get_theme_loader)):
    """Check DB and Redis connectivity and report cached theme bundles."""
    db_status = "ok"
    redis_status = "ok"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.warning("Health check: database unreachable", exc_info=True)
        db_status = "error"

    try:
        r = aioredis.from_url(settings.REDIS_URL)
        await r.ping()
        await r.aclose()
    except Exception:
        logger.warning("Health check: redis unreachable", exc_info=True)
        redis_status = "error"

    status = "ok" if db_status == "ok" and redis_status == "ok" else "degraded"
    return {
        "status": status,
        "db": db_status,
        "redis": redis_status,
        "themes": {"default": loader.default, "cached": sorted(loader.cache)},
        "version": VERSION,
    }
