"""TTL caches with single-flight refresh."""

from .ttl_cache import ContractCatalogCache, SingleFlightTTLCache, TokenHoldingsCache

__all__ = ["SingleFlightTTLCache", "TokenHoldingsCache", "ContractCatalogCache"]
