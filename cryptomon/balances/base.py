"""Base class for balance sources."""

from abc import ABC, abstractmethod
from typing import Optional

import httpx
import structlog

from ..data.models import Asset, Balance
from ..errors import GracefulDegradationError


class BalanceSource(ABC):
    """
    Fetches the balance of one asset for one wallet address.

    Failures never escape fetch(): network errors, bad status codes and
    malformed payloads all become Balance.unknown().
    """

    name = "balance"

    def __init__(self):
        self.logger = structlog.get_logger(f"{__name__}.{self.name}")
        self._success_count = 0
        self._unknown_count = 0

    @abstractmethod
    async def fetch_amount(self, asset: Asset, address: str) -> Optional[float]:
        """
        Fetch the scaled amount.

        Returns:
            Amount in whole units, or None when the source has no answer

        Raises:
            GracefulDegradationError, httpx.HTTPError: degraded to unknown by fetch()
        """

    async def fetch(self, asset: Asset, address: Optional[str]) -> Balance:
        if not address:
            return self._unknown()

        try:
            amount = await self.fetch_amount(asset, address)
        except (GracefulDegradationError, httpx.HTTPError, ValueError) as e:
            self.logger.warning(
                "Balance lookup failed",
                asset_id=asset.id,
                chain=asset.chain.value,
                error=str(e),
            )
            return self._unknown()

        if amount is None or amount < 0:
            return self._unknown()

        self._success_count += 1
        return Balance.known(amount)

    def _unknown(self) -> Balance:
        self._unknown_count += 1
        return Balance.unknown()

    def get_stats(self) -> dict:
        """Get lookup statistics."""
        total = self._success_count + self._unknown_count
        return {
            "name": self.name,
            "known_count": self._success_count,
            "unknown_count": self._unknown_count,
            "known_rate": self._success_count / total if total > 0 else 0.0,
        }
