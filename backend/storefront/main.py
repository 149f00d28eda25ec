"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.api.v1.router import api_v1_router
from storefront.client.api_client import StorefrontApiClient
from storefront.core.config import settings
from storefront.core.exceptions import (
    ProblemDetailError,
    database_error_handler,
    http_exception_handler,
    problem_detail_handler,
    validation_exception_handler,
)
from storefront.core.logging import configure_logging
from storefront.core.middleware.cors import get_cors_config
from storefront.core.middleware.request_id import RequestIdMiddleware
from storefront.db.session import engine
from storefront.themes.loader import ThemeLoader, get_theme_loader
from storefront.web.storefront import router as storefront_web_router

logger = logging.getLogger(__name__)


async def prepare_theme_loader(loader: ThemeLoader) -> None:
    """Log configuration problems and load the default bundle before traffic."""
    for problem in loader.validate():
        logger.warning("Theme configuration: %s", problem)
    bundle = await loader.load(None)
    if not bundle.is_complete:
        logger.error("Default theme bundle %r is incomplete", bundle.name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await prepare_theme_loader(get_theme_loader())

    app.state.storefront_api = StorefrontApiClient(settings.STOREFRONT_API_URL)
    logger.info("Storefront renderer using API at %s", settings.STOREFRONT_API_URL)
    try:
        yield
    finally:
        await app.state.storefront_api.aclose()
        await engine.dispose()


app = FastAPI(
    title="Storefront Theming API",
    version="0.1.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# Middleware (last added = first executed)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(CORSMiddleware, **get_cors_config())

# Exception handlers (RFC 7807)
app.add_exception_handler(ProblemDetailError, problem_detail_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(SQLAlchemyError, database_error_handler)

# Routes
app.include_router(api_v1_router, prefix="/api/v1")
app.include_router(storefront_web_router, prefix="/storefront", tags=["storefront-pages"])
