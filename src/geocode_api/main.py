"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from geocode_api.core.config import Settings, get_settings
from geocode_api.core.dependencies import build_dispatcher
from geocode_api.core.logging import setup_logging
from geocode_api.lib.geocoder.base import RandomSourceError
from geocode_api.lib.geocoder.transport import GeoProvider


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifecycle: configure logging on startup, close the provider on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, log_dir=settings.log_dir, verbose=settings.verbose)
    logger.info(
        f"Reverse geocoder ready with {len(settings.provider_endpoint_list)} provider endpoint(s), "
        f"cache TTL {settings.cache_ttl_minutes} minute(s)"
    )

    yield

    await app.state.provider.aclose()


def create_app(settings: Settings | None = None, provider: GeoProvider | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings; loaded from the environment when omitted.
        provider: Optional outbound transport override.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Geocode API",
        description="Reverse geocoding edge service with an in-memory TTL cache",
        version="0.1.0",
        lifespan=lifespan,
    )

    dispatcher = build_dispatcher(settings, provider)
    app.state.settings = settings
    app.state.dispatcher = dispatcher
    app.state.provider = dispatcher.provider
    app.state.healthy = True

    # Register exception handlers
    @app.exception_handler(RandomSourceError)
    async def random_source_error_handler(request: Request, exc: RandomSourceError) -> JSONResponse:
        logger.critical(f"Entropy source unavailable, marking service unhealthy: {exc}")
        request.app.state.healthy = False
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # Register middleware and routers
    from geocode_api.api.router import create_router, setup_middleware

    setup_middleware(app)
    app.include_router(create_router())

    return app
