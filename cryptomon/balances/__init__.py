"""Balance sources for each chain category and the dispatch between them."""

from .base import BalanceSource
from .dispatch import BalanceRouter
from .sources import (
    EvmNativeBalanceSource,
    ExplorerBalanceSource,
    TokenHoldingsBalanceSource,
    UnknownBalanceSource,
)

__all__ = [
    "BalanceSource",
    "BalanceRouter",
    "ExplorerBalanceSource",
    "EvmNativeBalanceSource",
    "TokenHoldingsBalanceSource",
    "UnknownBalanceSource",
]
