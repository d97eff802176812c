"""
Canonical data models for assets, wallets, prices and signals.

Immutable data structures shared by the resolver, balance sources,
signal engine and analysis pipeline.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional


class Chain(Enum):
    """Supported networks."""
    BITCOIN = "bitcoin"
    ETHEREUM = "ethereum"
    BASE = "base"
    SOLANA = "solana"
    DOGECOIN = "dogecoin"
    CARDANO = "cardano"

    @property
    def is_evm(self) -> bool:
        return self in (Chain.ETHEREUM, Chain.BASE)


class TradeAction(Enum):
    """Advisory action emitted by the signal engine."""
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


@dataclass(frozen=True)
class Asset:
    """A trackable asset on one chain."""
    id: str
    symbol: str
    display_name: str
    chain: Chain
    decimals: int
    market_id: str = ""                    # market-data key, defaults to id
    uses_native_balance: bool = True
    token_contract: Optional[str] = None   # lower-cased contract address

    def __post_init__(self):
        if self.decimals < 0:
            raise ValueError(f"decimals must be >= 0, got {self.decimals}")
        if not self.market_id:
            object.__setattr__(self, "market_id", self.id)


@dataclass(frozen=True)
class WalletAddressSet:
    """One optional wallet address per supported chain."""
    bitcoin: str = ""
    ethereum: str = ""
    base: str = ""
    solana: str = ""
    dogecoin: str = ""
    cardano: str = ""

    def for_chain(self, chain: Chain) -> Optional[str]:
        """Trimmed address for the chain, None when blank."""
        value = (getattr(self, chain.value) or "").strip()
        return value or None

    def normalized(self) -> "WalletAddressSet":
        """Copy with every slot trimmed."""
        return replace(self, **{
            chain.value: (getattr(self, chain.value) or "").strip() for chain in Chain
        })

    def with_address(self, chain: Chain, address: str) -> "WalletAddressSet":
        """Copy with one slot replaced."""
        return replace(self, **{chain.value: address})

    def present_chains(self) -> list[Chain]:
        return [chain for chain in Chain if self.for_chain(chain) is not None]


@dataclass(frozen=True)
class PricePoint:
    """Single USD price observation."""
    timestamp: datetime   # UTC
    price_usd: float


@dataclass(frozen=True)
class AlgorithmSignal:
    """Output of one indicator."""
    algorithm: str
    action: TradeAction
    reason: str


@dataclass(frozen=True)
class Balance:
    """Either a known non-negative amount or unknown."""
    amount: Optional[float] = None

    def __post_init__(self):
        if self.amount is not None and self.amount < 0:
            raise ValueError(f"balance must be >= 0, got {self.amount}")

    @classmethod
    def known(cls, amount: float) -> "Balance":
        return cls(amount=float(amount))

    @classmethod
    def unknown(cls) -> "Balance":
        return cls(amount=None)

    @property
    def is_known(self) -> bool:
        return self.amount is not None


@dataclass(frozen=True)
class MarketQuote:
    """Market data for one market id."""
    market_id: str
    current_price: float
    price_change_24h_pct: Optional[float] = None
    sparkline: Optional[list[float]] = None
    history: Optional[list[PricePoint]] = None  # explicit timestamps, used verbatim


@dataclass(frozen=True)
class CatalogEntry:
    """Market-data catalog entry for a token contract."""
    market_id: str
    symbol: str
    name: str


@dataclass(frozen=True)
class TokenHolding:
    """Token balance discovered for a wallet."""
    contract: str
    symbol: str
    name: str
    decimals: int
    amount: float


def decide_final_action(signals: list[AlgorithmSignal], margin: int = 2) -> TradeAction:
    """
    Vote on a list of signals.

    BUY when buys lead sells by at least `margin`, SELL when sells lead buys
    by at least `margin`, HOLD otherwise.
    """
    buys = sum(1 for s in signals if s.action == TradeAction.BUY)
    sells = sum(1 for s in signals if s.action == TradeAction.SELL)
    if buys - sells >= margin:
        return TradeAction.BUY
    if sells - buys >= margin:
        return TradeAction.SELL
    return TradeAction.HOLD


@dataclass(frozen=True)
class AssetAnalysis:
    """Analysis record for one asset in one refresh cycle."""
    asset: Asset
    current_price_usd: float
    price_change_24h_pct: Optional[float]
    balance: Balance
    history: list[PricePoint] = field(default_factory=list)
    signals: list[AlgorithmSignal] = field(default_factory=list)
    vote_margin: int = 2

    @property
    def final_action(self) -> TradeAction:
        if not self.history:
            return TradeAction.HOLD
        return decide_final_action(self.signals, self.vote_margin)

    @property
    def value_usd(self) -> Optional[float]:
        if not self.balance.is_known:
            return None
        return self.balance.amount * self.current_price_usd


DEFAULT_ASSETS: list[Asset] = [
    Asset(id="bitcoin", symbol="BTC", display_name="Bitcoin", chain=Chain.BITCOIN, decimals=8),
    Asset(id="ethereum", symbol="ETH", display_name="Ethereum", chain=Chain.ETHEREUM, decimals=18),
    Asset(id="solana", symbol="SOL", display_name="Solana", chain=Chain.SOLANA, decimals=9),
    Asset(id="dogecoin", symbol="DOGE", display_name="Dogecoin", chain=Chain.DOGECOIN, decimals=8),
    Asset(id="cardano", symbol="ADA", display_name="Cardano", chain=Chain.CARDANO, decimals=6),
]

BASE_NATIVE_ASSET = Asset(
    id="base-native-eth",
    market_id="ethereum",
    symbol="ETH",
    display_name="Base ETH",
    chain=Chain.BASE,
    decimals=18,
)


def default_asset_for(chain: Chain) -> Optional[Asset]:
    """Canonical asset of a statically known chain."""
    for asset in DEFAULT_ASSETS:
        if asset.chain == chain:
            return asset
    return None
