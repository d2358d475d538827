"""Dispatcher construction and FastAPI dependency injection.

The cache and provider are built once per application (or CLI invocation)
and handed to the dispatcher; there is no module-level cache singleton.
"""

from fastapi import Request

from geocode_api.core.config import Settings
from geocode_api.lib.geocoder.cache import TTLCache
from geocode_api.lib.geocoder.dispatcher import GeocodeDispatcher
from geocode_api.lib.geocoder.transport import GeoProvider, HttpxGeoProvider


def build_dispatcher(settings: Settings, provider: GeoProvider | None = None) -> GeocodeDispatcher:
    """Assemble a dispatcher with a fresh cache from application settings.

    Args:
        settings: Application settings.
        provider: Optional transport override; defaults to an httpx provider
            using the configured timeout and User-Agent.

    Returns:
        A ready-to-use GeocodeDispatcher.
    """
    if provider is None:
        provider = HttpxGeoProvider(
            timeout=settings.provider_timeout,
            user_agent=settings.provider_user_agent,
        )
    return GeocodeDispatcher(
        cache=TTLCache(verbose=settings.verbose),
        provider=provider,
        endpoints=settings.provider_endpoint_list,
        ttl=settings.cache_ttl,
        key_precision=settings.cache_key_precision,
    )


def get_dispatcher(request: Request) -> GeocodeDispatcher:
    """Return the dispatcher owned by the running application."""
    return request.app.state.dispatcher
