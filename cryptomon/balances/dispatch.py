"""Balance source dispatch by chain and asset shape."""

import asyncio
from typing import Optional, Sequence

import structlog

from ..data.models import Asset, Balance, Chain, WalletAddressSet
from .base import BalanceSource
from .sources import (
    EvmNativeBalanceSource,
    ExplorerBalanceSource,
    TokenHoldingsBalanceSource,
    UnknownBalanceSource,
)

logger = structlog.get_logger(__name__)


class BalanceRouter:
    """
    Picks the balance source for an asset.

    Rules, first match wins:
    1. Ethereum token contract: unknown (ERC-20 lookup not implemented)
    2. Ethereum native: JSON-RPC eth_getBalance
    3. Base token contract: pre-fetched holdings map
    4. Base native: JSON-RPC eth_getBalance
    5. Asset without native balance: unknown
    6. Anything else: chain explorer
    """

    def __init__(
        self,
        explorer: ExplorerBalanceSource,
        evm_native: EvmNativeBalanceSource,
        token_holdings: Optional[TokenHoldingsBalanceSource] = None,
    ):
        self.explorer = explorer
        self.evm_native = evm_native
        self.token_holdings = token_holdings or TokenHoldingsBalanceSource()
        # TODO: replace with an ERC-20 balanceOf source once Ethereum token discovery exists
        self.erc20_gap = UnknownBalanceSource("ERC-20 balance lookup not implemented")
        self.no_native_balance = UnknownBalanceSource("asset has no native balance")

    def with_token_balances(self, balances_by_contract: dict[str, float]) -> "BalanceRouter":
        """Router for one refresh cycle with its token holdings snapshot."""
        return BalanceRouter(
            explorer=self.explorer,
            evm_native=self.evm_native,
            token_holdings=TokenHoldingsBalanceSource(balances_by_contract),
        )

    def source_for(self, asset: Asset) -> BalanceSource:
        if asset.chain == Chain.ETHEREUM:
            return self.erc20_gap if asset.token_contract else self.evm_native

        if asset.chain == Chain.BASE:
            return self.token_holdings if asset.token_contract else self.evm_native

        if not asset.uses_native_balance:
            return self.no_native_balance

        return self.explorer

    async def fetch_balance(self, asset: Asset, addresses: WalletAddressSet) -> Balance:
        source = self.source_for(asset)
        return await source.fetch(asset, addresses.for_chain(asset.chain))

    async def fetch_all(self, assets: Sequence[Asset], addresses: WalletAddressSet) -> list[Balance]:
        """Fetch balances concurrently, preserving asset order."""
        balances = await asyncio.gather(
            *(self.fetch_balance(asset, addresses) for asset in assets)
        )
        logger.debug(
            "Balances fetched",
            assets=len(assets),
            known=sum(1 for b in balances if b.is_known),
        )
        return list(balances)
