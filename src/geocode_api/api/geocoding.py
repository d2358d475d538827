"""Reverse geocoding endpoints: health probe and coordinate lookup on ``/``."""

import json

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from geocode_api.core.dependencies import get_dispatcher
from geocode_api.lib.geocoder.dispatcher import GeocodeDispatcher
from geocode_api.schemas.geocoding import ErrorResponse, HealthResponse, ReverseGeocodeRequest

geocoding_router = APIRouter(tags=["geocoding"])


@geocoding_router.get("/", response_model=HealthResponse)
async def health(request: Request) -> JSONResponse:
    """Report service health. Never touches the cache or providers."""
    if not getattr(request.app.state, "healthy", True):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy"},
        )
    return JSONResponse(content={"status": "healthy"})


@geocoding_router.post(
    "/",
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ReverseGeocodeRequest.model_json_schema()}},
        }
    },
)
async def reverse_geocode(
    request: Request,
    dispatcher: GeocodeDispatcher = Depends(get_dispatcher),  # noqa: B008
) -> JSONResponse:
    """Reverse geocode a ``{"lat": ..., "lon": ...}`` body into an address payload.

    The ``X-Cache-Status`` header reports whether the payload was served from
    the cache (``HIT``) or fetched from a provider (``MISS``).
    """
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.debug(f"Rejected undecodable lookup body: {e}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": f"Invalid JSON body: {e}"},
        )

    result = await dispatcher.lookup(payload)
    return JSONResponse(status_code=result.status_code, content=result.body, headers=result.headers)


@geocoding_router.api_route("/", methods=["PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"], include_in_schema=False)
async def method_not_allowed() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        content={"status": "method not allowed"},
        headers={"Allow": "GET, POST"},
    )
