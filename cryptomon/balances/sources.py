"""Concrete balance sources."""

from typing import Optional

from ..data.models import Asset
from ..data.parsers import scale_amount
from ..remote.chain_clients import EvmRpcClient, ExplorerClient
from .base import BalanceSource

EVM_NATIVE_DECIMALS = 18


class ExplorerBalanceSource(BalanceSource):
    """Generic chain explorer: raw base units divided by 10^decimals."""

    name = "explorer"

    def __init__(self, client: ExplorerClient):
        super().__init__()
        self.client = client

    async def fetch_amount(self, asset: Asset, address: str) -> Optional[float]:
        raw = await self.client.get_raw_balance(asset.chain, address)
        return scale_amount(raw, asset.decimals)


class EvmNativeBalanceSource(BalanceSource):
    """Native currency on an EVM chain via eth_getBalance."""

    name = "evm_native"

    def __init__(self, client: EvmRpcClient):
        super().__init__()
        self.client = client

    async def fetch_amount(self, asset: Asset, address: str) -> Optional[float]:
        return await self.client.get_native_balance(asset.chain, address, EVM_NATIVE_DECIMALS)


class TokenHoldingsBalanceSource(BalanceSource):
    """Token amounts looked up in a pre-fetched contract → amount map."""

    name = "token_holdings"

    def __init__(self, balances_by_contract: Optional[dict[str, float]] = None):
        super().__init__()
        self.balances_by_contract = {
            contract.lower(): amount for contract, amount in (balances_by_contract or {}).items()
        }

    async def fetch_amount(self, asset: Asset, address: str) -> Optional[float]:
        if not asset.token_contract:
            return None
        return self.balances_by_contract.get(asset.token_contract.lower())


class UnknownBalanceSource(BalanceSource):
    """Always unknown; used where no lookup is implemented."""

    name = "unknown"

    def __init__(self, reason: str = "no balance lookup"):
        super().__init__()
        self.reason = reason

    async def fetch_amount(self, asset: Asset, address: str) -> Optional[float]:
        return None
