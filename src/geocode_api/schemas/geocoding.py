"""Pydantic v2 schemas for the reverse geocoding endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ReverseGeocodeRequest(BaseModel):
    """Documented shape of a lookup body.

    The endpoint validates the raw body itself so that string and numeric
    values, and missing fields, are reported as 400 rather than 422.
    """

    lat: str | float = Field(..., description="Latitude in decimal degrees (-90 to 90)", examples=["40.712776"])
    lon: str | float = Field(..., description="Longitude in decimal degrees (-180 to 180)", examples=["-74.005974"])


class HealthResponse(BaseModel):
    """Health probe response."""

    status: str


class ErrorResponse(BaseModel):
    """Error body returned for validation and provider failures."""

    detail: Any
