"""Unit tests for the httpx-backed provider transport."""

import httpx
import pytest

from geocode_api.core.metrics import HOST_REQUESTS_TOTAL
from geocode_api.lib.geocoder.base import ProviderTransportError
from geocode_api.lib.geocoder.transport import HttpxGeoProvider


def _provider(handler) -> HttpxGeoProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpxGeoProvider(timeout=0.5, client=client)


class TestHttpxGeoProviderFetch:
    """Tests for HttpxGeoProvider.fetch outcomes."""

    async def test_success_returns_status_and_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["lat"] == "33.749"
            return httpx.Response(200, json={"display_name": "Atlanta"})

        provider = _provider(handler)
        response = await provider.fetch("https://nominatim.test/reverse?lat=33.749&lon=-84.388")

        assert response.status_code == 200
        assert response.is_success
        assert b"Atlanta" in response.content

    async def test_non_success_status_is_returned_not_raised(self) -> None:
        provider = _provider(lambda request: httpx.Response(429, text="slow down"))
        response = await provider.fetch("https://nominatim.test/reverse")

        assert response.status_code == 429
        assert not response.is_success
        assert response.content == b"slow down"

    async def test_timeout_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        provider = _provider(handler)
        with pytest.raises(ProviderTransportError, match="timed out") as exc_info:
            await provider.fetch("https://nominatim.test/reverse")
        assert exc_info.value.status_code == 500

    async def test_connection_error_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        provider = _provider(handler)
        with pytest.raises(ProviderTransportError, match="Connection refused"):
            await provider.fetch("https://nominatim.test/reverse")

    async def test_decoding_error_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.DecodingError("bad gzip", request=request)

        provider = _provider(handler)
        with pytest.raises(ProviderTransportError, match="bad gzip"):
            await provider.fetch("https://nominatim.test/reverse")

    async def test_redirect_is_followed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/reverse":
                return httpx.Response(301, headers={"Location": "https://nominatim.test/v2/reverse?lat=1&lon=2"})
            return httpx.Response(200, json={"display_name": "Moved"})

        provider = _provider(handler)
        response = await provider.fetch("https://nominatim.test/reverse?lat=1&lon=2")

        assert response.status_code == 200
        assert b"Moved" in response.content

    async def test_redirect_loop_raises_transport_error(self) -> None:
        provider = _provider(
            lambda request: httpx.Response(302, headers={"Location": "https://nominatim.test/reverse"})
        )
        with pytest.raises(ProviderTransportError, match="redirects"):
            await provider.fetch("https://nominatim.test/reverse")

    async def test_counts_requests_per_host(self) -> None:
        provider = _provider(lambda request: httpx.Response(200, json={}))
        before = HOST_REQUESTS_TOTAL.labels(hostname="counted.test")._value.get()

        await provider.fetch("https://counted.test/reverse?lat=1&lon=2")
        await provider.fetch("https://counted.test/reverse?lat=3&lon=4")

        assert HOST_REQUESTS_TOTAL.labels(hostname="counted.test")._value.get() == before + 2


class TestHttpxGeoProviderLifecycle:
    """Tests for client ownership."""

    async def test_injected_client_is_not_closed(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        provider = HttpxGeoProvider(client=client)
        await provider.aclose()
        assert not client.is_closed
        await client.aclose()

    async def test_owned_client_is_closed(self) -> None:
        provider = HttpxGeoProvider(timeout=1.0, user_agent="test-agent/1.0")
        assert provider._client.headers["User-Agent"] == "test-agent/1.0"
        assert provider._client.follow_redirects
        await provider.aclose()
        assert provider._client.is_closed
