"""Outbound HTTP transport for reverse geocoding providers.

The dispatcher only depends on :class:`GeoProvider`; TLS, connection pooling
and request logging live here.
"""

import time
from abc import ABC, abstractmethod
from urllib.parse import urlsplit

import httpx
from loguru import logger

from geocode_api.core.metrics import HOST_REQUESTS_TOTAL
from geocode_api.lib.geocoder.base import ProviderResponse, ProviderTransportError

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = "geocode-api/0.1"


class GeoProvider(ABC):
    """Abstract outbound fetch capability."""

    @abstractmethod
    async def fetch(self, url: str) -> ProviderResponse:
        """Issue a GET request to ``url``.

        Args:
            url: Fully substituted provider URL.

        Returns:
            The provider's status code and raw body.

        Raises:
            ProviderTransportError: On timeout, connection failure or any other
                client-side HTTP error.
        """

    async def aclose(self) -> None:
        """Release any pooled resources."""


class HttpxGeoProvider(GeoProvider):
    """GeoProvider backed by a shared ``httpx.AsyncClient``.

    Args:
        timeout: Per-call ceiling in seconds.
        user_agent: User-Agent header sent to providers.
        client: Optional pre-built client (tests pass one with a mock
            transport). A client built here is owned and closed by ``aclose``.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
            follow_redirects=True,
        )

    async def fetch(self, url: str) -> ProviderResponse:
        hostname = urlsplit(url).hostname or "unknown"
        HOST_REQUESTS_TOTAL.labels(hostname=hostname).inc()

        start = time.perf_counter()
        try:
            response = await self._client.get(url, timeout=self._timeout, follow_redirects=True)
        except httpx.TimeoutException as e:
            logger.warning(f"HTTP request error: timeout calling {hostname}")
            raise ProviderTransportError(f"HTTP request error: timed out after {self._timeout}s") from e
        except httpx.TransportError as e:
            logger.warning(f"HTTP request error: {e}")
            raise ProviderTransportError(f"HTTP request error: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"HTTP request error: {type(e).__name__}: {e}")
            raise ProviderTransportError(f"HTTP request error: {e}") from e

        duration = time.perf_counter() - start
        logger.info(
            f"Request: GET {url} {response.http_version}, Response: {response.status_code}, Duration: {duration:.3f}s"
        )
        return ProviderResponse(status_code=response.status_code, content=response.content)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
