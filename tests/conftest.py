"""Pytest configuration and shared fixtures."""

import pytest
from typing import Any, Callable, Dict, List

from coinscope.data.models import CoinSnapshot, PricePoint


def make_coin(coin_id: str, **overrides: Any) -> CoinSnapshot:
    """Build a snapshot with plausible defaults."""
    fields = {
        "id": coin_id,
        "name": coin_id.capitalize(),
        "symbol": coin_id[:3].upper(),
        "price": 1.0,
        "change_24h": 0.0,
        "market_cap": 1_000_000.0,
        "volume_24h": 100_000.0,
    }
    fields.update(overrides)
    return CoinSnapshot(**fields)


def make_series(*pairs) -> List[PricePoint]:
    """[(timestamp, value), ...] -> price points."""
    return [PricePoint(timestamp=t, value=v) for t, v in pairs]


@pytest.fixture
def coin_factory() -> Callable[..., CoinSnapshot]:
    return make_coin


@pytest.fixture
def sample_coins() -> List[CoinSnapshot]:
    """Three coins in market-cap rank order."""
    return [
        make_coin("bitcoin", name="Bitcoin", symbol="BTC", price=43120.55, change_24h=1.12,
                  market_cap=842_000_000_000, volume_24h=24_500_000_000),
        make_coin("ethereum", name="Ethereum", symbol="ETH", price=2285.12, change_24h=-0.84,
                  market_cap=274_000_000_000, volume_24h=12_100_000_000),
        make_coin("solana", name="Solana", symbol="SOL", price=98.42, change_24h=8.42,
                  market_cap=43_000_000_000, volume_24h=3_900_000_000),
    ]


@pytest.fixture
def sample_markets_payload() -> List[Dict[str, Any]]:
    """Markets-list response as returned by the provider."""
    return [
        {
            "id": "bitcoin",
            "symbol": "btc",
            "name": "Bitcoin",
            "image": "https://assets.example/bitcoin.png",
            "current_price": 43120.55,
            "market_cap": 842000000000,
            "total_volume": 24500000000,
            "price_change_percentage_24h": 1.12,
            "sparkline_in_7d": {"price": [42000.0, 42500.5, 43120.55]},
        },
        {
            "id": "ethereum",
            "symbol": "eth",
            "name": "Ethereum",
            "image": "https://assets.example/ethereum.png",
            "current_price": 2285.12,
            "market_cap": 274000000000,
            "total_volume": 12100000000,
            "price_change_percentage_24h": -0.84,
            "sparkline_in_7d": {"price": []},
        },
    ]


@pytest.fixture
def sample_chart_payload() -> Dict[str, Any]:
    """Market-chart response with daily samples."""
    return {
        "prices": [
            [1700000000000, 100.0],
            [1700086400000, 110.0],
            [1700172800000, 90.0],
        ],
        "market_caps": [],
        "total_volumes": [],
    }
