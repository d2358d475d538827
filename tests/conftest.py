"""Shared test fixtures for settings, caches, a spy provider and dispatchers."""

import pytest
from stubs import BIGDATACLOUD_TEMPLATE, NEW_YORK_ADDRESS, NOMINATIM_TEMPLATE, FakeClock, StubProvider

from geocode_api.core.config import Settings
from geocode_api.lib.geocoder.cache import TTLCache
from geocode_api.lib.geocoder.dispatcher import GeocodeDispatcher


@pytest.fixture
def settings() -> Settings:
    """Test application settings pointing at unroutable provider hosts."""
    return Settings(
        _env_file=None,
        provider_endpoints=f"{NOMINATIM_TEMPLATE}|{BIGDATACLOUD_TEMPLATE}",
        cache_ttl_minutes=30,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    return TTLCache(clock=clock)


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider(body=NEW_YORK_ADDRESS)


@pytest.fixture
def dispatcher(cache: TTLCache, stub_provider: StubProvider) -> GeocodeDispatcher:
    return GeocodeDispatcher(
        cache=cache,
        provider=stub_provider,
        endpoints=[NOMINATIM_TEMPLATE, BIGDATACLOUD_TEMPLATE],
    )
