"""
Refresh cycle orchestration.

Wires the asset resolver, market data client, balance router and signal
engine into one refresh cycle, and coordinates overlapping refresh requests:
Wallet addresses → Assets → Market data + Balances → Signals → Analyses
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

import httpx
import structlog

from .assets.resolver import AssetResolver
from .balances.dispatch import BalanceRouter
from .balances.sources import EvmNativeBalanceSource, ExplorerBalanceSource
from .cache.ttl_cache import ContractCatalogCache, TokenHoldingsCache
from .config.defaults import DefaultConfig, get_default_config
from .data.history import history_for_quote
from .data.models import Asset, AssetAnalysis, Balance, Chain, MarketQuote, WalletAddressSet
from .logging.config import get_refresh_logger, log_signal_vote
from .remote.chain_clients import EvmRpcClient, ExplorerClient, TokenHoldingsClient
from .remote.http import create_http_client
from .remote.market_data import MarketDataClient
from .signals.engine import SignalEngine
from .utils.time import utc_now

logger = structlog.get_logger(__name__)
refresh_logger = get_refresh_logger(__name__)


class AnalysisPipeline:
    """
    Produces one AssetAnalysis per asset for a refresh cycle.

    Only the market data request can fail a cycle; balance and holdings
    lookups degrade to unknown values.
    """

    def __init__(
        self,
        market_client: MarketDataClient,
        balance_router: BalanceRouter,
        resolver: AssetResolver,
        signal_engine: Optional[SignalEngine] = None,
        history_source: str = "sparkline",
    ):
        self.market_client = market_client
        self.balance_router = balance_router
        self.resolver = resolver
        self.signal_engine = signal_engine or SignalEngine()
        self.history_source = history_source

    async def refresh(self, addresses: WalletAddressSet) -> list[AssetAnalysis]:
        """Resolve the tracked assets and analyse them."""
        assets = await self.resolver.resolve(addresses)
        return await self.analyze_assets(assets, addresses)

    async def analyze_assets(
        self,
        assets: Sequence[Asset],
        addresses: WalletAddressSet
    ) -> list[AssetAnalysis]:
        """
        Analyse assets in input order.

        Raises:
            RateLimitedError, MarketDataError: market data unavailable
        """
        if not assets:
            return []

        quotes = await self._fetch_quotes(assets)
        balances = await self._fetch_balances(assets, addresses)
        now = utc_now()

        analyses = []
        for asset, balance in zip(assets, balances):
            analyses.append(self._analyze_asset(asset, quotes.get(asset.market_id), balance, now))

        refresh_logger.info(
            "Refresh cycle analysed assets",
            assets=len(analyses),
            known_balances=sum(1 for a in analyses if a.balance.is_known),
        )
        return analyses

    async def _fetch_quotes(self, assets: Sequence[Asset]) -> dict[str, MarketQuote]:
        market_ids = {asset.market_id for asset in assets}
        quotes = await self.market_client.fetch_markets(market_ids)

        if self.history_source == "market_chart":
            ids = sorted(quotes)
            charts = await asyncio.gather(
                *(self.market_client.fetch_market_chart(market_id) for market_id in ids)
            )
            quotes = {
                market_id: MarketQuote(
                    market_id=market_id,
                    current_price=quotes[market_id].current_price,
                    price_change_24h_pct=quotes[market_id].price_change_24h_pct,
                    sparkline=quotes[market_id].sparkline,
                    history=chart,
                )
                for market_id, chart in zip(ids, charts)
            }
        return quotes

    async def _fetch_balances(self, assets: Sequence[Asset], addresses: WalletAddressSet) -> list[Balance]:
        base_address = addresses.for_chain(Chain.BASE)
        token_balances: dict[str, float] = {}
        if base_address is not None and any(a.chain == Chain.BASE and a.token_contract for a in assets):
            token_balances = await self.resolver.holdings_cache.balances_for(base_address)

        router = self.balance_router.with_token_balances(token_balances)
        return await router.fetch_all(assets, addresses)

    def _analyze_asset(
        self,
        asset: Asset,
        quote: Optional[MarketQuote],
        balance: Balance,
        now: datetime
    ) -> AssetAnalysis:
        history = history_for_quote(quote, now=now)
        signals, _ = self.signal_engine.analyze(history)

        analysis = AssetAnalysis(
            asset=asset,
            current_price_usd=quote.current_price if quote is not None else 0.0,
            price_change_24h_pct=quote.price_change_24h_pct if quote is not None else None,
            balance=balance,
            history=history,
            signals=signals,
            vote_margin=self.signal_engine.params.vote_margin,
        )
        log_signal_vote(logger, asset.id, signals, analysis.final_action.value,
                        context={"points": len(history)})
        return analysis


@dataclass(frozen=True)
class RefreshState:
    """Last published refresh outcome."""
    analyses: list[AssetAnalysis] = field(default_factory=list)
    last_updated: Optional[datetime] = None
    error: Optional[str] = None
    is_loading: bool = False


class RefreshCoordinator:
    """
    Runs refresh cycles, one at a time.

    Starting a refresh cancels the outstanding one; a cancelled cycle never
    publishes anything. A failed cycle records its error and keeps the
    previously published analyses.
    """

    def __init__(self, pipeline: AnalysisPipeline):
        self.pipeline = pipeline
        self.state = RefreshState()
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    def start_refresh(self, addresses: WalletAddressSet) -> asyncio.Task:
        if self._task is not None and not self._task.done():
            refresh_logger.info("Cancelling superseded refresh", generation=self._generation)
            self._task.cancel()

        self._generation += 1
        self.state = RefreshState(
            analyses=self.state.analyses,
            last_updated=self.state.last_updated,
            error=None,
            is_loading=True,
        )
        self._task = asyncio.create_task(self._run(addresses, self._generation))
        return self._task

    async def refresh(self, addresses: WalletAddressSet) -> Optional[RefreshState]:
        """
        Run a refresh and wait for it.

        Returns:
            The published state, or None if a newer refresh superseded this one
        """
        task = self.start_refresh(addresses)
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task.cancelled():
            return None
        return task.result()

    async def aclose(self) -> None:
        """Cancel any outstanding refresh."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.wait({self._task})
        self.state = RefreshState(
            analyses=self.state.analyses,
            last_updated=self.state.last_updated,
            error=self.state.error,
            is_loading=False,
        )

    async def _run(self, addresses: WalletAddressSet, generation: int) -> RefreshState:
        # task-local binding, each refresh task runs in a copied context
        structlog.contextvars.bind_contextvars(refresh_generation=generation)
        try:
            analyses = await self.pipeline.refresh(addresses)
        except asyncio.CancelledError:
            refresh_logger.info("Refresh cancelled", generation=generation)
            raise
        except Exception as e:
            refresh_logger.error("Refresh failed", generation=generation, error=str(e))
            if generation == self._generation:
                self.state = RefreshState(
                    analyses=self.state.analyses,
                    last_updated=self.state.last_updated,
                    error=str(e) or "Failed to refresh data",
                    is_loading=False,
                )
            return self.state

        if generation == self._generation:
            self.state = RefreshState(
                analyses=analyses,
                last_updated=utc_now(),
                error=None,
                is_loading=False,
            )
        return self.state


def create_pipeline(
    config: Optional[DefaultConfig] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> AnalysisPipeline:
    """Wire a pipeline with process-wide caches from configuration."""
    config = config or get_default_config()
    http_client = http_client or create_http_client(config.http)
    endpoints = config.endpoints

    market_client = MarketDataClient(http_client, endpoints.market_data_url, config.market_data)
    holdings_cache = TokenHoldingsCache(
        TokenHoldingsClient(http_client, endpoints.token_holdings_url),
        ttl_seconds=config.cache.token_holdings_ttl_seconds,
    )
    catalog_cache = ContractCatalogCache(
        market_client,
        ttl_seconds=config.cache.contract_catalog_ttl_seconds,
    )
    router = BalanceRouter(
        explorer=ExplorerBalanceSource(ExplorerClient(http_client, endpoints.explorer_url)),
        evm_native=EvmNativeBalanceSource(EvmRpcClient(http_client, endpoints.rpc_urls)),
    )

    logger.info("Analysis pipeline initialized", history_source=config.market_data.history_source)
    return AnalysisPipeline(
        market_client=market_client,
        balance_router=router,
        resolver=AssetResolver(holdings_cache, catalog_cache),
        signal_engine=SignalEngine(config.signals),
        history_source=config.market_data.history_source,
    )
