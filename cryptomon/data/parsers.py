"""
Provider payload parsers.

Converts decoded JSON payloads from the market-data provider, chain
explorer, JSON-RPC nodes and token-holdings indexer into canonical
objects. Every parser raises MalformedResponseError when the payload does
not have the expected shape; callers decide whether that degrades or fails.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..errors import MalformedResponseError
from .models import CatalogEntry, MarketQuote, PricePoint, TokenHolding

DEFAULT_TOKEN_DECIMALS = 18


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def scale_amount(raw: Any, decimals: int) -> float:
    """
    Scale an integer base-unit amount down by `decimals` places.

    Args:
        raw: Integer amount as int, float or decimal string
        decimals: Number of decimal places of the asset

    Returns:
        Amount in whole units
    """
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError) as e:
        raise MalformedResponseError(
            f"Invalid amount: {raw!r}", expected_format="decimal integer"
        ) from e
    if not value.is_finite() or value < 0:
        raise MalformedResponseError(
            f"Invalid amount: {raw!r}", expected_format="non-negative integer"
        )
    return float(value.scaleb(-decimals))


def hex_to_amount(hex_value: str, decimals: int = 18) -> float:
    """Convert a 0x-prefixed hex quantity to a scaled amount."""
    if not isinstance(hex_value, str):
        raise MalformedResponseError(
            f"Expected hex string, got {type(hex_value).__name__}",
            expected_format="0x-prefixed hex",
        )
    digits = hex_value[2:] if hex_value[:2].lower() == "0x" else hex_value
    digits = digits or "0"
    try:
        value = int(digits, 16)
    except ValueError as e:
        raise MalformedResponseError(
            f"Invalid hex quantity: {hex_value!r}", expected_format="0x-prefixed hex"
        ) from e
    return float(Decimal(value).scaleb(-decimals))


def parse_market_quotes(payload: Any) -> dict[str, MarketQuote]:
    """Parse a /coins/markets response into quotes keyed by market id."""
    if not isinstance(payload, list):
        raise MalformedResponseError(
            "Markets response must be a list", source="market_data", expected_format="list"
        )

    quotes: dict[str, MarketQuote] = {}
    for entry in payload:
        if not isinstance(entry, dict) or not entry.get("id"):
            continue

        sparkline = None
        raw_sparkline = entry.get("sparkline_in_7d")
        if isinstance(raw_sparkline, dict) and isinstance(raw_sparkline.get("price"), list):
            sparkline = [
                price for price in (_optional_float(p) for p in raw_sparkline["price"])
                if price is not None
            ]

        market_id = str(entry["id"])
        quotes[market_id] = MarketQuote(
            market_id=market_id,
            current_price=_optional_float(entry.get("current_price")) or 0.0,
            price_change_24h_pct=_optional_float(entry.get("price_change_percentage_24h")),
            sparkline=sparkline,
        )
    return quotes


def parse_market_chart(payload: Any) -> list[PricePoint]:
    """Parse a /coins/{id}/market_chart response into explicit price points."""
    if not isinstance(payload, dict) or not isinstance(payload.get("prices"), list):
        raise MalformedResponseError(
            "Market chart response must contain a 'prices' list",
            source="market_data",
            expected_format="{prices: [[ms, price], ...]}",
        )

    points = []
    for pair in payload["prices"]:
        if not isinstance(pair, (list, tuple)) or len(pair) < 2:
            continue
        ts_ms = _optional_float(pair[0])
        price = _optional_float(pair[1])
        if ts_ms is None or price is None or price <= 0:
            continue
        points.append(PricePoint(
            timestamp=datetime.fromtimestamp(ts_ms / 1000.0, tz=timezone.utc),
            price_usd=price,
        ))

    points.sort(key=lambda p: p.timestamp)
    return points


def parse_contract_catalog(payload: Any, platform: str = "base") -> dict[str, CatalogEntry]:
    """Parse a /coins/list?include_platform=true response keyed by contract."""
    if not isinstance(payload, list):
        raise MalformedResponseError(
            "Coin list response must be a list", source="market_data", expected_format="list"
        )

    catalog: dict[str, CatalogEntry] = {}
    for coin in payload:
        if not isinstance(coin, dict) or not coin.get("id"):
            continue
        platforms = coin.get("platforms") or {}
        if not isinstance(platforms, dict):
            continue
        contract = str(platforms.get(platform) or "").strip()
        if not contract:
            continue
        catalog[contract.lower()] = CatalogEntry(
            market_id=str(coin["id"]),
            symbol=str(coin.get("symbol") or ""),
            name=str(coin.get("name") or ""),
        )
    return catalog


def parse_explorer_balance(payload: Any) -> Any:
    """
    Extract the raw balance from a chain-explorer address dashboard.

    Expected shape: {"data": {"<address>": {"address": {"balance": <int>}}}}
    """
    try:
        containers = payload["data"]
        first = next(iter(containers.values()))
        raw = first["address"]["balance"]
    except (KeyError, TypeError, AttributeError, StopIteration) as e:
        raise MalformedResponseError(
            "Explorer response missing data.<address>.address.balance",
            source="explorer",
        ) from e
    if raw is None:
        raise MalformedResponseError("Explorer balance is null", source="explorer")
    return raw


def parse_rpc_balance(payload: Any, decimals: int = 18) -> float:
    """Extract and scale the `result` of an eth_getBalance response."""
    if not isinstance(payload, dict):
        raise MalformedResponseError("JSON-RPC response must be an object", source="rpc")
    if payload.get("error"):
        raise MalformedResponseError(f"JSON-RPC error: {payload['error']}", source="rpc")
    result = payload.get("result")
    if result is None:
        raise MalformedResponseError("JSON-RPC response missing result", source="rpc")
    return hex_to_amount(result, decimals)


def parse_token_holdings(payload: Any) -> list[TokenHolding]:
    """
    Parse a token-balances response into holdings.

    Entries without a contract or value are skipped; missing or negative
    decimals default to 18.
    """
    if not isinstance(payload, list):
        raise MalformedResponseError(
            "Token balances response must be a list", source="token_holdings",
            expected_format="list",
        )

    holdings = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        token = entry.get("token")
        if not isinstance(token, dict):
            continue
        contract = token.get("address_hash") or token.get("address")
        raw_value = entry.get("value")
        if not contract or raw_value is None:
            continue

        try:
            decimals = int(token.get("decimals"))
        except (TypeError, ValueError):
            decimals = DEFAULT_TOKEN_DECIMALS
        if decimals < 0:
            decimals = DEFAULT_TOKEN_DECIMALS

        try:
            amount = scale_amount(raw_value, decimals)
        except MalformedResponseError:
            continue

        holdings.append(TokenHolding(
            contract=str(contract).lower(),
            symbol=str(token.get("symbol") or ""),
            name=str(token.get("name") or ""),
            decimals=decimals,
            amount=amount,
        ))
    return holdings
