"""FastAPI application entry point for CabinetBox."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from cabinetbox import __version__
from cabinetbox.config import settings
from cabinetbox.models.import_session import ImportSession
from cabinetbox.routers import import_router
from cabinetbox.services.product_client import ProductServiceClient

logger = logging.getLogger(__name__)

# Rate limiter configuration
limiter = Limiter(key_func=get_remote_address)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app.state.product_client = ProductServiceClient.from_settings()
    logger.info("Product service endpoint: %s", settings.product_service_url)

    yield

    await app.state.product_client.aclose()


app = FastAPI(
    title=settings.app_name,
    description="Cabinet product import from WooCommerce product exports",
    version=__version__,
    lifespan=lifespan,
)

# One import session per application instance
app.state.import_session = ImportSession()

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Only allow origins from the whitelist; empty list means same-origin only
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
        max_age=600,
    )


@app.get("/health", tags=["Health"])
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": __version__,
            "app_name": settings.app_name,
        }
    )


app.include_router(import_router.router, prefix="/api/import", tags=["Import"])
