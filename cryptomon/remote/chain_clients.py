"""
Clients for on-chain balance data.

All three clients raise TransientNetworkError or MalformedResponseError on
failure; the balance sources decide how to degrade.
"""

from typing import Any, Optional

import httpx
import structlog

from ..data.models import Chain, TokenHolding
from ..data.parsers import parse_explorer_balance, parse_rpc_balance, parse_token_holdings
from ..errors import TransientNetworkError
from .http import get_json, post_json

logger = structlog.get_logger(__name__)


class ExplorerClient:
    """Blockchair-style address dashboard client."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = "https://api.blockchair.com"):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    async def get_raw_balance(self, chain: Chain, address: str) -> Any:
        """Raw integer balance in the chain's base unit."""
        url = f"{self.base_url}/{chain.value}/dashboards/address/{address}"
        payload = await get_json(self.http_client, url, source="explorer")
        return parse_explorer_balance(payload)


class EvmRpcClient:
    """Minimal JSON-RPC client for native EVM balances."""

    def __init__(self, http_client: httpx.AsyncClient, rpc_urls: dict[str, str]):
        self.http_client = http_client
        self.rpc_urls = dict(rpc_urls)
        self._request_id = 0

    def rpc_url_for(self, chain: Chain) -> Optional[str]:
        return self.rpc_urls.get(chain.value)

    async def get_native_balance(self, chain: Chain, address: str, decimals: int = 18) -> float:
        """eth_getBalance(address, "latest") scaled down by `decimals`."""
        url = self.rpc_url_for(chain)
        if url is None:
            raise TransientNetworkError(f"No RPC endpoint configured for {chain.value}", source="rpc")

        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": "eth_getBalance",
            "params": [address, "latest"],
            "id": self._request_id,
        }
        response = await post_json(self.http_client, url, payload, source="rpc")
        return parse_rpc_balance(response, decimals)


class TokenHoldingsClient:
    """Blockscout-style token balances client."""

    def __init__(self, http_client: httpx.AsyncClient, base_url: str = "https://base.blockscout.com"):
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    async def fetch_holdings(self, address: str) -> list[TokenHolding]:
        url = f"{self.base_url}/api/v2/addresses/{address}/token-balances"
        payload = await get_json(self.http_client, url, source="token_holdings")
        holdings = parse_token_holdings(payload)
        logger.debug("Fetched token holdings", address=address, holdings=len(holdings))
        return holdings
