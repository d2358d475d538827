"""Geocoder library: reverse geocoding with an in-memory TTL cache.

Public API:
    - Coordinate: Validated latitude/longitude pair
    - validate_coordinates: Parse an untrusted payload into a Coordinate
    - cache_key: Fixed-precision cache key for a Coordinate
    - TTLCache: Concurrent cache with lazy expiry
    - pick_endpoint: Uniform random provider endpoint selection
    - GeoProvider / HttpxGeoProvider: Outbound transport interface and implementation
    - GeocodeDispatcher: Request lifecycle orchestration
    - LookupResult / LookupState / CacheStatus: Dispatcher outcome types
    - GeocodeError and subclasses: Per-request error taxonomy
    - RandomSourceError: Fatal entropy failure
"""

from geocode_api.lib.geocoder.base import (
    CoordinateValidationError,
    GeocodeError,
    ProviderDecodeError,
    ProviderResponse,
    ProviderTransportError,
    RandomSourceError,
    UpstreamStatusError,
)
from geocode_api.lib.geocoder.cache import TTLCache
from geocode_api.lib.geocoder.coordinates import Coordinate, cache_key, validate_coordinates
from geocode_api.lib.geocoder.dispatcher import (
    CACHE_STATUS_HEADER,
    CacheStatus,
    GeocodeDispatcher,
    LookupResult,
    LookupState,
)
from geocode_api.lib.geocoder.selector import pick_endpoint
from geocode_api.lib.geocoder.transport import GeoProvider, HttpxGeoProvider

__all__ = [
    "CACHE_STATUS_HEADER",
    "CacheStatus",
    "Coordinate",
    "CoordinateValidationError",
    "GeoProvider",
    "GeocodeDispatcher",
    "GeocodeError",
    "HttpxGeoProvider",
    "LookupResult",
    "LookupState",
    "ProviderDecodeError",
    "ProviderResponse",
    "ProviderTransportError",
    "RandomSourceError",
    "TTLCache",
    "UpstreamStatusError",
    "cache_key",
    "pick_endpoint",
    "validate_coordinates",
]
