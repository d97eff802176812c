"""Resolves tracked assets from saved wallet addresses and token discovery."""

from typing import Iterable

import structlog

from ..cache.ttl_cache import ContractCatalogCache, TokenHoldingsCache
from ..data.models import (
    BASE_NATIVE_ASSET,
    Asset,
    Chain,
    TokenHolding,
    WalletAddressSet,
    default_asset_for,
)

logger = structlog.get_logger(__name__)

STATIC_CHAINS = (Chain.BITCOIN, Chain.ETHEREUM, Chain.SOLANA, Chain.DOGECOIN, Chain.CARDANO)


def dedupe_assets(assets: Iterable[Asset]) -> list[Asset]:
    """Drop repeated ids, keeping the first occurrence and the original order."""
    seen: set[str] = set()
    result = []
    for asset in assets:
        if asset.id in seen:
            continue
        seen.add(asset.id)
        result.append(asset)
    return result


class AssetResolver:
    """Builds the list of assets to analyse for a wallet address set."""

    def __init__(self, holdings_cache: TokenHoldingsCache, catalog_cache: ContractCatalogCache):
        self.holdings_cache = holdings_cache
        self.catalog_cache = catalog_cache

    async def resolve(self, addresses: WalletAddressSet) -> list[Asset]:
        """
        Resolve tracked assets.

        Default assets of chains with an address come first, then the Base
        native asset and any Base tokens found in the contract catalog.
        """
        assets: list[Asset] = []

        for chain in STATIC_CHAINS:
            if addresses.for_chain(chain) is not None:
                assets.append(default_asset_for(chain))

        base_address = addresses.for_chain(Chain.BASE)
        if base_address is not None:
            assets.append(BASE_NATIVE_ASSET)
            assets.extend(await self.discover_base_tokens(base_address))

        resolved = dedupe_assets(assets)
        logger.info(
            "Resolved tracked assets",
            count=len(resolved),
            asset_ids=[asset.id for asset in resolved],
        )
        return resolved

    async def discover_base_tokens(self, address: str) -> list[Asset]:
        """Assets for positive Base holdings whose contract is in the catalog."""
        holdings = [h for h in await self.holdings_cache.holdings_for(address) if h.amount > 0]
        if not holdings:
            return []

        catalog = await self.catalog_cache.catalog()
        discovered = []
        for holding in holdings:
            entry = catalog.get(holding.contract.lower())
            if entry is None:
                logger.debug("Skipping uncatalogued token", contract=holding.contract)
                continue
            discovered.append(self._token_asset(holding, entry.market_id, entry.symbol, entry.name))
        return discovered

    @staticmethod
    def _token_asset(holding: TokenHolding, market_id: str, symbol: str, name: str) -> Asset:
        contract = holding.contract.lower()
        return Asset(
            id=f"base:{contract}",
            market_id=market_id,
            symbol=symbol.upper(),
            display_name=name,
            chain=Chain.BASE,
            decimals=holding.decimals,
            uses_native_balance=False,
            token_contract=contract,
        )
