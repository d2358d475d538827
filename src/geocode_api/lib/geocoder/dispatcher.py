"""Reverse geocode request lifecycle: validate, cache, dispatch, translate.

A lookup moves through::

    RECEIVED -> VALIDATED -> CACHE_HIT
                          -> CACHE_MISS -> PROVIDER_CALLED -> PROVIDER_OK | PROVIDER_ERROR

and always ends in exactly one :class:`LookupResult` (RESPONDED). There are no
retries; an entry is written to the cache only on PROVIDER_OK.
"""

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from typing import Any

from loguru import logger

from geocode_api.core.metrics import CACHE_LOOKUPS_TOTAL
from geocode_api.lib.geocoder.base import (
    CoordinateValidationError,
    GeocodeError,
    ProviderDecodeError,
    ProviderResponse,
    UpstreamStatusError,
)
from geocode_api.lib.geocoder.cache import TTLCache
from geocode_api.lib.geocoder.coordinates import (
    DEFAULT_KEY_PRECISION,
    Coordinate,
    cache_key,
    validate_coordinates,
)
from geocode_api.lib.geocoder.selector import pick_endpoint
from geocode_api.lib.geocoder.transport import GeoProvider

CACHE_STATUS_HEADER = "X-Cache-Status"
DEFAULT_TTL = timedelta(minutes=30)


class LookupState(StrEnum):
    """States of a single reverse geocode lookup."""

    RECEIVED = "received"
    VALIDATED = "validated"
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    PROVIDER_CALLED = "provider_called"
    PROVIDER_OK = "provider_ok"
    PROVIDER_ERROR = "provider_error"
    RESPONDED = "responded"


class CacheStatus(StrEnum):
    """Value of the cache status response header."""

    HIT = "HIT"
    MISS = "MISS"


@dataclass
class LookupResult:
    """Terminal outcome of a lookup, ready to be rendered as an HTTP response."""

    status_code: int
    body: Any
    cache_status: CacheStatus | None = None
    states: list[LookupState] = field(default_factory=list)

    @property
    def headers(self) -> dict[str, str]:
        if self.cache_status is None:
            return {}
        return {CACHE_STATUS_HEADER: self.cache_status.value}

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class GeocodeDispatcher:
    """Orchestrates one reverse geocode lookup per call.

    Args:
        cache: Cache shared by every lookup this dispatcher serves.
        provider: Outbound transport used on cache misses.
        endpoints: URL templates with ``{lat}`` and ``{lon}`` placeholders.
        ttl: Lifetime of cached provider responses.
        key_precision: Decimal places kept when building cache keys.
    """

    def __init__(
        self,
        cache: TTLCache,
        provider: GeoProvider,
        endpoints: Sequence[str],
        ttl: timedelta = DEFAULT_TTL,
        key_precision: int = DEFAULT_KEY_PRECISION,
    ) -> None:
        if not endpoints:
            msg = "At least one provider endpoint must be configured"
            raise ValueError(msg)
        self._cache = cache
        self._provider = provider
        self._endpoints = tuple(endpoints)
        self._ttl = ttl
        self._key_precision = key_precision

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @property
    def provider(self) -> GeoProvider:
        return self._provider

    async def lookup(self, payload: Any) -> LookupResult:
        """Resolve a raw ``{"lat": ..., "lon": ...}`` payload to an address.

        Per-request failures are translated into error results; only a broken
        entropy source (``RandomSourceError``) propagates.

        Args:
            payload: Decoded, untrusted request body.

        Returns:
            The terminal LookupResult.
        """
        states = [LookupState.RECEIVED]
        try:
            coordinate = validate_coordinates(payload)
        except CoordinateValidationError as e:
            logger.debug(f"Rejected lookup payload: {e.message}")
            return self._respond(states, e.status_code, {"detail": e.detail})
        states.append(LookupState.VALIDATED)

        key = cache_key(coordinate, self._key_precision)
        cached, found = self._cache.get(key)
        if found:
            states.append(LookupState.CACHE_HIT)
            CACHE_LOOKUPS_TOTAL.labels(result=CacheStatus.HIT.value).inc()
            return self._respond(states, 200, cached, CacheStatus.HIT)

        states.append(LookupState.CACHE_MISS)
        CACHE_LOOKUPS_TOTAL.labels(result=CacheStatus.MISS.value).inc()

        try:
            location = await self._call_provider(coordinate, states)
        except GeocodeError as e:
            states.append(LookupState.PROVIDER_ERROR)
            logger.warning(f"Reverse geocode failed for {key}: {e.message}")
            return self._respond(states, e.status_code, {"detail": e.detail}, CacheStatus.MISS)

        states.append(LookupState.PROVIDER_OK)
        self._cache.set(key, location, self._ttl)
        return self._respond(states, 200, location, CacheStatus.MISS)

    async def _call_provider(self, coordinate: Coordinate, states: list[LookupState]) -> Any:
        template = pick_endpoint(self._endpoints)
        url = template.format(lat=coordinate.lat_text, lon=coordinate.lon_text)
        states.append(LookupState.PROVIDER_CALLED)
        response = await self._provider.fetch(url)
        return self._decode(response)

    @staticmethod
    def _decode(response: ProviderResponse) -> Any:
        """Decode a provider response, raising on non-2xx or invalid JSON."""
        if not response.is_success:
            raise UpstreamStatusError(response.status_code, _upstream_detail(response.content))
        try:
            return _loads(response.content)
        except ValueError as e:
            raise ProviderDecodeError(f"Error reading response body: {e}") from e

    @staticmethod
    def _respond(
        states: list[LookupState],
        status_code: int,
        body: Any,
        cache_status: CacheStatus | None = None,
    ) -> LookupResult:
        states.append(LookupState.RESPONDED)
        return LookupResult(status_code=status_code, body=body, cache_status=cache_status, states=states)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def _loads(content: bytes) -> Any:
    """Decode JSON, rejecting the NaN, Infinity and -Infinity literals."""
    return json.loads(content, parse_constant=_reject_constant)


def _upstream_detail(content: bytes) -> Any:
    """Best-effort rendering of an error body: JSON when possible, else text."""
    try:
        return _loads(content)
    except ValueError:
        return content.decode("utf-8", errors="replace")
