"""
Async client for the market-data provider.

Issues the markets-list and market-chart requests over httpx and translates
non-success responses into the network error taxonomy.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx
import structlog

from ..config.defaults import ApiParams, CompareParams
from ..data.models import CoinSnapshot, PricePoint, Segment
from ..data.parsers import (
    parse_json_payload,
    parse_market_chart_payload,
    parse_markets_payload,
)
from ..errors import (
    InvalidInputError,
    MissingInputError,
    NetworkFailureError,
    RateLimitedError,
    UnauthorizedError,
)

logger = structlog.get_logger(__name__)


def _retry_after_seconds(response: httpx.Response, default: float) -> float:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return default
    try:
        seconds = float(raw)
    except ValueError:
        return default
    return seconds if seconds > 0 else default


class MarketDataClient:
    """HTTP client for the markets-list and market-chart endpoints."""

    def __init__(self, params: Optional[ApiParams] = None,
                 compare_params: Optional[CompareParams] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.params = params or ApiParams()
        self.compare_params = compare_params or CompareParams()
        self.logger = logger
        self._client = httpx.AsyncClient(
            base_url=self.params.base_url,
            timeout=self.params.timeout_seconds,
            headers={"Accept": "application/json", "User-Agent": "coinscope/0.1"},
            transport=transport,
        )

    async def __aenter__(self) -> "MarketDataClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, query: dict[str, Any]) -> Any:
        """GET a provider path and decode the body, raising on any failure."""
        try:
            response = await self._client.get(path, params=query)
        except httpx.HTTPError as e:
            self.logger.warning("Provider transport error", path=path, error=str(e))
            raise NetworkFailureError(str(e) or type(e).__name__, url=path)

        if response.is_success:
            return parse_json_payload(response.content)

        status = response.status_code
        url = str(response.request.url)
        self.logger.warning("Provider returned error status", path=path, status_code=status)

        if status == 429:
            raise RateLimitedError(
                "Rate limited by provider",
                retry_after=_retry_after_seconds(response, self.params.default_retry_after_seconds),
                url=url,
            )
        if status == 401:
            raise UnauthorizedError("Provider blocked the request", url=url)
        raise NetworkFailureError(f"HTTP {status}", status_code=status, url=url)

    async def fetch_markets(self, segment: Segment) -> list[CoinSnapshot]:
        """
        Fetch one ranked segment of the markets list.

        Args:
            segment: Page and page size to request

        Returns:
            Snapshots in provider rank order
        """
        payload = await self._get_json("/coins/markets", {
            "vs_currency": self.params.vs_currency,
            "order": "market_cap_desc",
            "per_page": str(segment.size),
            "page": str(segment.page),
            "sparkline": "true",
            "price_change_percentage": "24h",
        })
        coins = parse_markets_payload(payload)
        self.logger.debug("Fetched markets", segment=segment.key, count=len(coins))
        return coins

    async def fetch_market_chart(self, coin_id: str, days: int,
                                 vs_currency: Optional[str] = None) -> list[PricePoint]:
        """
        Fetch the price series of one asset over a range of days.

        Args:
            coin_id: Provider asset id
            days: One of the configured ranges (7/30/90/365 by default)
            vs_currency: Fiat quote currency, defaults to the configured one

        Returns:
            Price points ascending by timestamp

        Raises:
            MissingInputError: If coin_id is empty (no request is made)
            InvalidInputError: If days is not an allowed range
        """
        if not coin_id:
            raise MissingInputError("Missing coin id", field="coin_id")
        if days not in self.compare_params.allowed_days:
            raise InvalidInputError(f"Unsupported range: {days} days", field="days", value=days)

        payload = await self._get_json(f"/coins/{quote(coin_id, safe='')}/market_chart", {
            "vs_currency": vs_currency or self.params.vs_currency,
            "days": str(days),
            "interval": self.params.chart_interval,
        })
        return parse_market_chart_payload(payload)
