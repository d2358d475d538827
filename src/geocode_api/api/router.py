"""Root API router, metrics endpoint and middleware registration."""

from fastapi import APIRouter, FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from geocode_api.api.middleware import RequestLoggingMiddleware

metrics_router = APIRouter()


@metrics_router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def create_router() -> APIRouter:
    """Create the root router with all sub-routers included.

    Returns:
        Configured API router.
    """
    from geocode_api.api.geocoding import geocoding_router

    root_router = APIRouter()
    root_router.include_router(geocoding_router)
    root_router.include_router(metrics_router)
    return root_router


def setup_middleware(app: FastAPI) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
    """
    app.add_middleware(RequestLoggingMiddleware)
