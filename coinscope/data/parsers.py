"""
Provider-specific parsers for converting raw market-data payloads.

This module maps the markets-list and market-chart responses of a
CoinGecko-shaped API into canonical data structures, substituting safe
defaults for missing numeric fields.
"""

from typing import Any, Optional, Union

import orjson

from ..errors import MalformedPayloadError
from .models import CoinSnapshot, PricePoint


def parse_json_payload(raw_data: Union[str, bytes]) -> Any:
    """
    Parse a raw JSON body.

    Args:
        raw_data: Response body from the provider

    Returns:
        Decoded JSON value

    Raises:
        MalformedPayloadError: If JSON parsing fails
    """
    try:
        return orjson.loads(raw_data)
    except orjson.JSONDecodeError as e:
        preview = raw_data[:200] if isinstance(raw_data, str) else raw_data[:200].decode("utf-8", "replace")
        raise MalformedPayloadError(f"Invalid JSON: {e}", raw_data=preview, expected_format="json")


def _number(value: Any, default: float = 0.0) -> float:
    """Provider numbers may be null; null maps to the default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def parse_coin(item: dict[str, Any]) -> CoinSnapshot:
    """
    Map one markets-list entry to a CoinSnapshot.

    Raises:
        MalformedPayloadError: If the entry has no id
    """
    if not isinstance(item, dict) or not item.get("id"):
        raise MalformedPayloadError(
            "Market entry without id", raw_data=repr(item)[:200], expected_format="object with id"
        )

    sparkline_block = item.get("sparkline_in_7d") or {}
    sparkline_raw = sparkline_block.get("price") if isinstance(sparkline_block, dict) else None
    sparkline = tuple(_number(p) for p in sparkline_raw) if isinstance(sparkline_raw, list) else ()

    return CoinSnapshot(
        id=str(item["id"]),
        name=str(item.get("name") or item["id"]),
        symbol=str(item.get("symbol") or "").upper(),
        image=str(item.get("image") or ""),
        price=_number(item.get("current_price")),
        change_24h=_number(item.get("price_change_percentage_24h")),
        market_cap=_number(item.get("market_cap")),
        volume_24h=_number(item.get("total_volume")),
        sparkline=sparkline,
    )


def parse_markets_payload(payload: Any) -> list[CoinSnapshot]:
    """
    Map a markets-list response to snapshots, preserving rank order.

    Raises:
        MalformedPayloadError: If the payload is not a list
    """
    if not isinstance(payload, list):
        raise MalformedPayloadError(
            "Markets response is not a list", raw_data=repr(payload)[:200], expected_format="list"
        )
    return [parse_coin(item) for item in payload]


def _parse_pair(pair: Any) -> Optional[PricePoint]:
    if not isinstance(pair, (list, tuple)) or len(pair) < 2:
        return None
    try:
        timestamp = int(pair[0])
    except (TypeError, ValueError):
        return None
    value = pair[1]
    return PricePoint(timestamp=timestamp, value=None if value is None else _number(value))


def parse_market_chart_payload(payload: Any) -> list[PricePoint]:
    """
    Map a market-chart response to an ordered price series.

    Entries that are not [timestamp, price] pairs are dropped.

    Raises:
        MalformedPayloadError: If the payload is not an object
    """
    if not isinstance(payload, dict):
        raise MalformedPayloadError(
            "Market chart response is not an object", raw_data=repr(payload)[:200],
            expected_format="object with prices"
        )

    prices = payload.get("prices")
    if not isinstance(prices, list):
        return []

    points = [p for p in (_parse_pair(pair) for pair in prices) if p is not None]
    points.sort(key=lambda p: p.timestamp)
    return points
