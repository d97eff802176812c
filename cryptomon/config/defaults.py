"""Default configuration parameters for the crypto monitor."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SignalParams:
    """Indicator parameters for the signal engine."""
    min_history_points: int = 30

    # SMA crossover
    sma_short_period: int = 7
    sma_long_period: int = 25

    # RSI
    rsi_period: int = 14
    rsi_oversold: float = 30.0
    rsi_overbought: float = 70.0

    # MACD
    macd_fast_period: int = 12
    macd_slow_period: int = 26
    macd_signal_period: int = 9

    # Bollinger bands
    bollinger_period: int = 20
    bollinger_stddev_mult: float = 2.0

    # Rate of change
    roc_period: int = 10
    roc_threshold_pct: float = 5.0

    # Vote
    vote_margin: int = 2


@dataclass(frozen=True)
class MarketDataParams:
    """Market data provider parameters."""
    vs_currency: str = "usd"
    max_attempts: int = 3                  # 1 request + 2 retries on HTTP 429
    retry_base_delay_seconds: float = 1.5  # delay = attempt_index * base
    history_days: int = 7
    history_source: str = "sparkline"    # sparkline | market_chart
    catalog_platform: str = "base"


@dataclass(frozen=True)
class CacheParams:
    """TTL cache parameters."""
    token_holdings_ttl_seconds: float = 60.0
    contract_catalog_ttl_seconds: float = 24 * 60 * 60.0


@dataclass(frozen=True)
class EndpointParams:
    """Upstream endpoint base URLs."""
    market_data_url: str = "https://api.coingecko.com"
    explorer_url: str = "https://api.blockchair.com"
    token_holdings_url: str = "https://base.blockscout.com"
    rpc_urls: dict[str, str] = field(default_factory=lambda: {
        "ethereum": "https://cloudflare-eth.com",
        "base": "https://mainnet.base.org",
    })


@dataclass(frozen=True)
class HttpParams:
    """Shared HTTP client parameters."""
    timeout_seconds: float = 20.0
    user_agent: str = "cryptomon/0.1"


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    signals: SignalParams
    market_data: MarketDataParams
    cache: CacheParams
    endpoints: EndpointParams
    http: HttpParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        signals=SignalParams(),
        market_data=MarketDataParams(),
        cache=CacheParams(),
        endpoints=EndpointParams(),
        http=HttpParams(),
    )
