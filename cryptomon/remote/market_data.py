"""
Market-data provider client.

Batched quotes with 24h change and 7-day sparkline, explicit-timestamp
market charts, and the contract catalog used for token discovery. Quote and
chart requests retry on HTTP 429 with a linear backoff; every other failure
is fatal for the caller.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Optional

import httpx
import structlog

from ..config.defaults import MarketDataParams
from ..data.models import CatalogEntry, MarketQuote, PricePoint
from ..data.parsers import parse_contract_catalog, parse_market_chart, parse_market_quotes
from ..errors import MalformedResponseError, MarketDataError, RateLimitedError
from .http import decode_json, is_rate_limited

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class AttemptStatus(Enum):
    """Classification of a single request attempt."""
    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"


@dataclass(frozen=True)
class AttemptOutcome:
    """Tagged result of one request attempt."""
    status: AttemptStatus
    value: Any = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: Any) -> "AttemptOutcome":
        return cls(status=AttemptStatus.SUCCESS, value=value)

    @classmethod
    def retryable(cls, error: Exception) -> "AttemptOutcome":
        return cls(status=AttemptStatus.RETRYABLE, error=error)

    @classmethod
    def fatal(cls, error: Exception) -> "AttemptOutcome":
        return cls(status=AttemptStatus.FATAL, error=error)


def backoff_delay(attempt_index: int, base_delay: float) -> float:
    """Delay before retry number `attempt_index` (1-based): 1.5s, 3.0s, ..."""
    return attempt_index * base_delay


class MarketDataClient:
    """Client for a CoinGecko-compatible market data API."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://api.coingecko.com",
        params: Optional[MarketDataParams] = None,
        sleep: Optional[Sleep] = None,
    ):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.params = params or MarketDataParams()
        self._sleep = sleep or asyncio.sleep

    async def fetch_markets(self, market_ids: Iterable[str]) -> dict[str, MarketQuote]:
        """
        Fetch quotes for all market ids in one batched request.

        Raises:
            RateLimitedError: still rate limited after the last attempt
            MarketDataError: any other failure
        """
        ids = sorted({market_id for market_id in market_ids if market_id})
        if not ids:
            return {}

        query = {
            "vs_currency": self.params.vs_currency,
            "ids": ",".join(ids),
            "sparkline": "true",
            "price_change_percentage": "24h",
        }
        quotes = await self._get_with_retry(
            "/api/v3/coins/markets", query, parse_market_quotes, market_ids=ids
        )
        logger.info("Fetched market quotes", requested=len(ids), received=len(quotes))
        return quotes

    async def fetch_market_chart(self, market_id: str, days: Optional[int] = None) -> list[PricePoint]:
        """Fetch an explicit-timestamp price history for one market id."""
        query = {
            "vs_currency": self.params.vs_currency,
            "days": days or self.params.history_days,
        }
        return await self._get_with_retry(
            f"/api/v3/coins/{market_id}/market_chart", query, parse_market_chart,
            market_ids=[market_id],
        )

    async def fetch_contract_catalog(self) -> dict[str, CatalogEntry]:
        """
        Fetch the contract → market id catalog for the discovery platform.

        Best effort: any failure yields an empty mapping.
        """
        url = f"{self.base_url}/api/v3/coins/list"
        try:
            response = await self.http_client.get(url, params={"include_platform": "true"})
            response.raise_for_status()
            catalog = parse_contract_catalog(
                decode_json(response, "market_data"), self.params.catalog_platform
            )
        except (httpx.HTTPError, MalformedResponseError) as e:
            logger.warning("Contract catalog fetch failed", error=str(e))
            return {}

        logger.info("Fetched contract catalog", entries=len(catalog))
        return catalog

    async def _attempt(self, url: str, query: dict[str, Any], parse: Callable[[Any], Any],
                       market_ids: list[str]) -> AttemptOutcome:
        try:
            response = await self.http_client.get(url, params=query)
        except httpx.HTTPError as e:
            return AttemptOutcome.fatal(MarketDataError(
                f"Market data request failed: {e}", market_ids=market_ids
            ))

        if is_rate_limited(response):
            return AttemptOutcome.retryable(RateLimitedError(
                "Market data provider rate limit reached",
                status_code=response.status_code,
            ))

        if not response.is_success:
            return AttemptOutcome.fatal(MarketDataError(
                f"Market data provider returned HTTP {response.status_code}",
                status_code=response.status_code,
                market_ids=market_ids,
            ))

        try:
            return AttemptOutcome.success(parse(decode_json(response, "market_data")))
        except MalformedResponseError as e:
            return AttemptOutcome.fatal(MarketDataError(
                f"Malformed market data response: {e}", market_ids=market_ids
            ))

    async def _get_with_retry(self, path: str, query: dict[str, Any],
                              parse: Callable[[Any], Any], market_ids: list[str]) -> Any:
        url = f"{self.base_url}{path}"
        max_attempts = self.params.max_attempts
        last_error: Optional[Exception] = None

        for attempt in range(max_attempts):
            outcome = await self._attempt(url, query, parse, market_ids)

            if outcome.status == AttemptStatus.SUCCESS:
                return outcome.value

            if outcome.status == AttemptStatus.FATAL:
                raise outcome.error

            last_error = outcome.error
            last_error.retry_count = attempt
            last_error.max_retries = max_attempts - 1
            if attempt + 1 >= max_attempts:
                break

            delay = backoff_delay(attempt + 1, self.params.retry_base_delay_seconds)
            logger.warning(
                "Market data rate limited, backing off",
                attempt=attempt + 1,
                delay_seconds=delay,
                path=path,
            )
            await self._sleep(delay)

        logger.error("Market data retries exhausted", attempts=max_attempts, path=path)
        raise last_error
