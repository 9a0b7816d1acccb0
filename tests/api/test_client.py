"""Tests for the market-data HTTP client."""

import httpx
import orjson
import pytest

from coinscope.api.client import MarketDataClient
from coinscope.config.defaults import ApiParams
from coinscope.data.models import Segment
from coinscope.errors import (
    InvalidInputError,
    MalformedPayloadError,
    MissingInputError,
    NetworkFailureError,
    RateLimitedError,
    UnauthorizedError,
)


def client_for(handler, **params):
    return MarketDataClient(params=ApiParams(**params), transport=httpx.MockTransport(handler))


class TestFetchMarkets:
    """Test markets-list requests."""

    @pytest.mark.asyncio
    async def test_fetch_markets_request_and_mapping(self, sample_markets_payload):
        """Test query parameters and snapshot mapping."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=orjson.dumps(sample_markets_payload))

        async with client_for(handler) as client:
            coins = await client.fetch_markets(Segment(page=2, size=100))

        request = seen[0]
        assert request.url.path == "/api/v3/coins/markets"
        assert request.url.params["page"] == "2"
        assert request.url.params["per_page"] == "100"
        assert request.url.params["vs_currency"] == "usd"
        assert request.url.params["order"] == "market_cap_desc"
        assert request.url.params["sparkline"] == "true"

        assert [c.id for c in coins] == ["bitcoin", "ethereum"]
        assert coins[0].symbol == "BTC"
        assert coins[0].price == 43120.55
        assert coins[0].sparkline == (42000.0, 42500.5, 43120.55)
        assert coins[1].change_24h == -0.84

    @pytest.mark.asyncio
    async def test_rate_limited(self):
        """Test 429 maps to RateLimitedError with Retry-After hint."""
        def handler(request):
            return httpx.Response(429, headers={"Retry-After": "30"})

        async with client_for(handler) as client:
            with pytest.raises(RateLimitedError) as exc_info:
                await client.fetch_markets(Segment())

        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == 30.0
        assert "429" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_rate_limited_default_hint(self):
        """Test configured default when Retry-After is missing."""
        def handler(request):
            return httpx.Response(429)

        async with client_for(handler, default_retry_after_seconds=60.0) as client:
            with pytest.raises(RateLimitedError) as exc_info:
                await client.fetch_markets(Segment())

        assert exc_info.value.retry_after == 60.0

    @pytest.mark.asyncio
    async def test_rate_limit_message_differs_from_generic(self):
        """Test 429 and 500 produce different user messages."""
        statuses = iter([429, 500])

        def handler(request):
            return httpx.Response(next(statuses))

        async with client_for(handler) as client:
            with pytest.raises(RateLimitedError) as limited:
                await client.fetch_markets(Segment())
            with pytest.raises(NetworkFailureError) as generic:
                await client.fetch_markets(Segment())

        assert not isinstance(generic.value, RateLimitedError)
        assert generic.value.user_message == "HTTP 500"
        assert limited.value.user_message != generic.value.user_message

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        """Test 401 maps to UnauthorizedError."""
        def handler(request):
            return httpx.Response(401)

        async with client_for(handler) as client:
            with pytest.raises(UnauthorizedError) as exc_info:
                await client.fetch_markets(Segment())

        assert "401" in exc_info.value.user_message

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test connection failures map to NetworkFailureError."""
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with client_for(handler) as client:
            with pytest.raises(NetworkFailureError) as exc_info:
                await client.fetch_markets(Segment())

        assert exc_info.value.status_code is None
        assert exc_info.value.user_message.startswith("Network error")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        """Test undecodable body maps to MalformedPayloadError."""
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        async with client_for(handler) as client:
            with pytest.raises(MalformedPayloadError):
                await client.fetch_markets(Segment())


class TestFetchMarketChart:
    """Test market-chart requests."""

    @pytest.mark.asyncio
    async def test_fetch_chart(self, sample_chart_payload):
        """Test request shape and series mapping."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=orjson.dumps(sample_chart_payload))

        async with client_for(handler) as client:
            points = await client.fetch_market_chart("bitcoin", 30)

        assert seen[0].url.path == "/api/v3/coins/bitcoin/market_chart"
        assert seen[0].url.params["days"] == "30"
        assert seen[0].url.params["interval"] == "daily"
        assert seen[0].url.params["vs_currency"] == "usd"
        assert [p.value for p in points] == [100.0, 110.0, 90.0]

    @pytest.mark.asyncio
    async def test_missing_id_rejected_before_network(self):
        """Test empty asset id never reaches the transport."""
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"prices": []})

        async with client_for(handler) as client:
            with pytest.raises(MissingInputError):
                await client.fetch_market_chart("", 30)

        assert calls == []

    @pytest.mark.asyncio
    async def test_unsupported_range(self):
        """Test days outside the allowed ranges."""
        def handler(request):
            return httpx.Response(200, json={"prices": []})

        async with client_for(handler) as client:
            with pytest.raises(InvalidInputError):
                await client.fetch_market_chart("bitcoin", 14)
