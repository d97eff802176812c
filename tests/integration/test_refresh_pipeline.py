"""End-to-end tests for the analysis pipeline and refresh coordinator."""

import asyncio

import httpx
import pytest

from cryptomon.assets import AssetResolver
from cryptomon.balances import BalanceRouter
from cryptomon.balances.sources import EvmNativeBalanceSource, ExplorerBalanceSource
from cryptomon.config.defaults import get_default_config
from cryptomon.data.models import (
    CatalogEntry,
    MarketQuote,
    TokenHolding,
    TradeAction,
    WalletAddressSet,
)
from cryptomon.engine import AnalysisPipeline, RefreshCoordinator, create_pipeline
from cryptomon.errors import MarketDataError, RateLimitedError
from cryptomon.signals.engine import DATA_CHECK

ADDRESSES = WalletAddressSet(bitcoin="bc1qwallet", ethereum="0xeth", base="0xbase")


def sparkline(count: int = 40) -> list[float]:
    return [100.0 + i for i in range(count)]


class FakeMarketClient:
    """Serves canned quotes; can fail or block on demand."""

    def __init__(self, quotes=None, error=None):
        self.quotes = quotes if quotes is not None else {}
        self.error = error
        self.gate = None
        self.requested = []
        self.charts = []

    async def fetch_markets(self, market_ids):
        self.requested.append(sorted(market_ids))
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return {mid: q for mid, q in self.quotes.items() if mid in set(market_ids)}

    async def fetch_market_chart(self, market_id, days=None):
        self.charts.append(market_id)
        return []


class FakeExplorer:
    async def get_raw_balance(self, chain, address):
        return 50000000


class FakeRpc:
    async def get_native_balance(self, chain, address, decimals=18):
        return 2.0


class StubHoldingsCache:
    def __init__(self, holdings):
        self.holdings = holdings

    async def holdings_for(self, address):
        return self.holdings

    async def balances_for(self, address):
        return {h.contract: h.amount for h in self.holdings}


class StubCatalogCache:
    def __init__(self, catalog):
        self._catalog = catalog

    async def catalog(self):
        return self._catalog


def quote(market_id: str, price: float, points: int = 40) -> MarketQuote:
    return MarketQuote(market_id=market_id, current_price=price, price_change_24h_pct=1.0,
                       sparkline=sparkline(points))


def make_pipeline(market_client, holdings=None, catalog=None, history_source="sparkline"):
    router = BalanceRouter(
        explorer=ExplorerBalanceSource(FakeExplorer()),
        evm_native=EvmNativeBalanceSource(FakeRpc()),
    )
    resolver = AssetResolver(StubHoldingsCache(holdings or []), StubCatalogCache(catalog or {}))
    return AnalysisPipeline(market_client, router, resolver, history_source=history_source)


@pytest.fixture
def market_client():
    return FakeMarketClient({
        "bitcoin": quote("bitcoin", 40000.0),
        "ethereum": quote("ethereum", 2000.0),
        "usd-coin": quote("usd-coin", 1.0, points=10),
    })


@pytest.fixture
def token_holdings():
    return [TokenHolding(contract="0xabc", symbol="USDC", name="USD Coin", decimals=6, amount=12.0)]


@pytest.fixture
def token_catalog():
    return {"0xabc": CatalogEntry(market_id="usd-coin", symbol="usdc", name="USD Coin")}


class TestAnalysisPipeline:
    """Test one refresh cycle."""

    @pytest.mark.asyncio
    async def test_full_cycle(self, market_client, token_holdings, token_catalog):
        pipeline = make_pipeline(market_client, token_holdings, token_catalog)

        analyses = await pipeline.refresh(ADDRESSES)

        assert [a.asset.id for a in analyses] == ["bitcoin", "ethereum", "base-native-eth", "base:0xabc"]
        # One batched request with distinct market ids
        assert market_client.requested == [["bitcoin", "ethereum", "usd-coin"]]

        bitcoin, ethereum, base_eth, usdc = analyses
        assert bitcoin.balance.amount == 0.5
        assert bitcoin.value_usd == 20000.0
        assert ethereum.balance.amount == 2.0
        assert base_eth.current_price_usd == 2000.0
        assert len(bitcoin.history) == 40
        assert len(bitcoin.signals) == 5
        assert usdc.balance.amount == 12.0

    @pytest.mark.asyncio
    async def test_short_history_holds(self, market_client, token_holdings, token_catalog):
        pipeline = make_pipeline(market_client, token_holdings, token_catalog)

        analyses = await pipeline.refresh(ADDRESSES)
        usdc = analyses[-1]

        assert [s.algorithm for s in usdc.signals] == [DATA_CHECK]
        assert usdc.final_action == TradeAction.HOLD

    @pytest.mark.asyncio
    async def test_missing_quote(self):
        pipeline = make_pipeline(FakeMarketClient({}))

        analyses = await pipeline.refresh(WalletAddressSet(bitcoin="bc1q"))

        assert analyses[0].current_price_usd == 0.0
        assert analyses[0].history == []
        assert analyses[0].final_action == TradeAction.HOLD

    @pytest.mark.asyncio
    async def test_no_assets_no_requests(self, market_client):
        pipeline = make_pipeline(market_client)
        assert await pipeline.refresh(WalletAddressSet()) == []
        assert market_client.requested == []

    @pytest.mark.asyncio
    async def test_market_failure_raises(self):
        pipeline = make_pipeline(FakeMarketClient(error=RateLimitedError("429")))
        with pytest.raises(RateLimitedError):
            await pipeline.refresh(WalletAddressSet(bitcoin="bc1q"))

    @pytest.mark.asyncio
    async def test_market_chart_mode(self, market_client):
        pipeline = make_pipeline(market_client, history_source="market_chart")

        analyses = await pipeline.refresh(WalletAddressSet(bitcoin="bc1q", ethereum="0xeth"))

        assert sorted(market_client.charts) == ["bitcoin", "ethereum"]
        # Explicit (empty) chart history wins over the sparkline
        assert all(a.history == [] for a in analyses)


class TestRefreshCoordinator:
    """Test refresh publication, failure and cancellation."""

    @pytest.mark.asyncio
    async def test_success_publishes(self, market_client):
        coordinator = RefreshCoordinator(make_pipeline(market_client))

        state = await coordinator.refresh(WalletAddressSet(bitcoin="bc1q"))

        assert state is coordinator.state
        assert [a.asset.id for a in state.analyses] == ["bitcoin"]
        assert state.error is None
        assert state.is_loading is False
        assert state.last_updated is not None

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_analyses(self, market_client):
        coordinator = RefreshCoordinator(make_pipeline(market_client))
        first = await coordinator.refresh(WalletAddressSet(bitcoin="bc1q"))

        market_client.error = MarketDataError("Market data provider returned HTTP 500", status_code=500)
        state = await coordinator.refresh(WalletAddressSet(bitcoin="bc1q"))

        assert state.analyses == first.analyses
        assert state.last_updated == first.last_updated
        assert "HTTP 500" in state.error
        assert state.is_loading is False

    @pytest.mark.asyncio
    async def test_loading_flag(self, market_client):
        market_client.gate = asyncio.Event()
        coordinator = RefreshCoordinator(make_pipeline(market_client))

        task = coordinator.start_refresh(WalletAddressSet(bitcoin="bc1q"))
        assert coordinator.state.is_loading is True

        market_client.gate.set()
        await task
        assert coordinator.state.is_loading is False

    @pytest.mark.asyncio
    async def test_new_refresh_cancels_outstanding(self, market_client):
        market_client.gate = asyncio.Event()
        coordinator = RefreshCoordinator(make_pipeline(market_client))

        first = coordinator.start_refresh(WalletAddressSet(bitcoin="bc1q"))
        await asyncio.sleep(0)
        market_client.gate = None
        second = coordinator.start_refresh(WalletAddressSet(ethereum="0xeth"))

        state = await second
        await asyncio.wait({first})

        assert first.cancelled()
        assert [a.asset.id for a in state.analyses] == ["ethereum"]
        assert [a.asset.id for a in coordinator.state.analyses] == ["ethereum"]

    @pytest.mark.asyncio
    async def test_superseded_refresh_returns_none(self, market_client):
        market_client.gate = asyncio.Event()
        coordinator = RefreshCoordinator(make_pipeline(market_client))

        waiter = asyncio.create_task(coordinator.refresh(WalletAddressSet(bitcoin="bc1q")))
        await asyncio.sleep(0)
        market_client.gate = None
        await coordinator.start_refresh(WalletAddressSet(ethereum="0xeth"))

        assert await waiter is None

    @pytest.mark.asyncio
    async def test_aclose_cancels(self, market_client):
        market_client.gate = asyncio.Event()
        coordinator = RefreshCoordinator(make_pipeline(market_client))

        task = coordinator.start_refresh(WalletAddressSet(bitcoin="bc1q"))
        await asyncio.sleep(0)
        await coordinator.aclose()

        assert task.cancelled()
        assert coordinator.state.is_loading is False
        assert coordinator.state.analyses == []


@pytest.mark.asyncio
async def test_create_pipeline_wiring():
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=[])))
    config = get_default_config()

    pipeline = create_pipeline(config, http_client=client)

    assert pipeline.history_source == "sparkline"
    assert pipeline.signal_engine.params == config.signals
    assert pipeline.resolver.holdings_cache.ttl_seconds == 60.0
    assert pipeline.resolver.catalog_cache.ttl_seconds == 86400.0
    await client.aclose()
