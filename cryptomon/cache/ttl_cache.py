"""
Read-check-fetch-store caches shared across refresh cycles.

Each key has its own asyncio.Lock, so the freshness check, the upstream
fetch and the store happen as one critical section: at most one fetch per
key is in flight and concurrent callers wait for it and reuse its result.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Optional, TypeVar

import structlog

from ..data.models import CatalogEntry, TokenHolding
from ..errors import GracefulDegradationError
from ..remote.chain_clients import TokenHoldingsClient
from ..remote.market_data import MarketDataClient
from ..utils.time import is_fresh, monotonic_seconds

logger = structlog.get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

HOLDINGS_TTL_SECONDS = 60.0
CATALOG_TTL_SECONDS = 24 * 60 * 60.0


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """Stored value with the monotonic time it was fetched at."""
    value: V
    fetched_at: float


class SingleFlightTTLCache(ABC, Generic[K, V]):
    """TTL cache with at most one in-flight refresh per key."""

    def __init__(self, ttl_seconds: float, clock: Optional[Callable[[], float]] = None,
                 name: str = "cache"):
        self.ttl_seconds = ttl_seconds
        self.name = name
        self._clock = clock or monotonic_seconds
        self._entries: dict[K, CacheEntry[V]] = {}
        self._locks: dict[K, asyncio.Lock] = {}
        self.fetch_count = 0

    @abstractmethod
    async def load(self, key: K) -> V:
        """Fetch a fresh value from upstream."""

    def normalize_key(self, key: K) -> K:
        return key

    def is_valid(self, entry: CacheEntry[V], now: float) -> bool:
        return is_fresh(entry.fetched_at, self.ttl_seconds, now)

    def should_store(self, value: V) -> bool:
        return True

    def peek(self, key: K) -> Optional[CacheEntry[V]]:
        """Current entry without refreshing, valid or not."""
        return self._entries.get(self.normalize_key(key))

    def invalidate(self, key: K) -> None:
        self._entries.pop(self.normalize_key(key), None)

    async def get_or_refresh(self, key: K) -> V:
        """
        Return the cached value for `key`, refreshing it when missing or expired.

        When the refreshed value is rejected by should_store, the previous
        entry (possibly stale) is served if there is one.
        """
        key = self.normalize_key(key)
        lock = self._locks.setdefault(key, asyncio.Lock())

        async with lock:
            entry = self._entries.get(key)
            now = self._clock()
            if entry is not None and self.is_valid(entry, now):
                return entry.value

            self.fetch_count += 1
            value = await self.load(key)

            if self.should_store(value):
                self._entries[key] = CacheEntry(value=value, fetched_at=now)
                return value

            if entry is not None:
                logger.info("Serving stale cache entry", cache=self.name)
                return entry.value
            return value


class TokenHoldingsCache(SingleFlightTTLCache[str, list[TokenHolding]]):
    """Per-address token holdings, 60 second TTL, empty results cached too."""

    def __init__(self, client: TokenHoldingsClient, ttl_seconds: float = HOLDINGS_TTL_SECONDS,
                 clock: Optional[Callable[[], float]] = None):
        super().__init__(ttl_seconds, clock=clock, name="token_holdings")
        self.client = client

    def normalize_key(self, key: str) -> str:
        return key.strip().lower()

    async def load(self, key: str) -> list[TokenHolding]:
        try:
            return await self.client.fetch_holdings(key)
        except GracefulDegradationError as e:
            logger.warning("Token holdings fetch failed", address=key, error=str(e))
            return []

    async def holdings_for(self, address: str) -> list[TokenHolding]:
        return await self.get_or_refresh(address)

    async def balances_for(self, address: str) -> dict[str, float]:
        """Holdings as a lower-cased contract → amount map."""
        holdings = await self.get_or_refresh(address)
        return {holding.contract.lower(): holding.amount for holding in holdings}


class ContractCatalogCache(SingleFlightTTLCache[str, dict[str, CatalogEntry]]):
    """Global contract catalog, 24 hour TTL, never overwritten by an empty fetch."""

    CATALOG_KEY = "catalog"

    def __init__(self, client: MarketDataClient, ttl_seconds: float = CATALOG_TTL_SECONDS,
                 clock: Optional[Callable[[], float]] = None):
        super().__init__(ttl_seconds, clock=clock, name="contract_catalog")
        self.client = client

    def is_valid(self, entry: CacheEntry[dict[str, CatalogEntry]], now: float) -> bool:
        return bool(entry.value) and super().is_valid(entry, now)

    def should_store(self, value: dict[str, CatalogEntry]) -> bool:
        return bool(value)

    async def load(self, key: str) -> dict[str, CatalogEntry]:
        return await self.client.fetch_contract_catalog()

    async def catalog(self) -> dict[str, CatalogEntry]:
        return await self.get_or_refresh(self.CATALOG_KEY)

    async def lookup(self, contract: str) -> Optional[CatalogEntry]:
        return (await self.catalog()).get(contract.strip().lower())
