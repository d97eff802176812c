"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Callable

import httpx
import pytest

from cryptomon.data.models import PricePoint, WalletAddressSet

NOW = datetime(2024, 1, 8, 12, 0, 0, tzinfo=timezone.utc)

ETH_ADDRESS = "0x" + "ab" * 20
BTC_ADDRESS = "bc1qar0srrr7xfkvy5l643lydnw9re59gtzzwf5mdq"


def make_history(closes: list[float], end: datetime = NOW) -> list[PricePoint]:
    """Hourly price points ending at `end`."""
    last = len(closes) - 1
    return [
        PricePoint(timestamp=end - timedelta(hours=last - i), price_usd=price)
        for i, price in enumerate(closes)
    ]


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def rising_closes() -> list[float]:
    """Steady uptrend: 100, 101, ..., 139."""
    return [100.0 + i for i in range(40)]


@pytest.fixture
def falling_closes() -> list[float]:
    """Steady downtrend: 140, 139, ..., 101."""
    return [140.0 - i for i in range(40)]


@pytest.fixture
def flat_closes() -> list[float]:
    return [100.0] * 40


@pytest.fixture
def wallet_addresses() -> WalletAddressSet:
    return WalletAddressSet(bitcoin=BTC_ADDRESS, ethereum=ETH_ADDRESS)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient that routes every request to a handler."""
    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return factory


@pytest.fixture
def history_factory() -> Callable[[list[float]], list[PricePoint]]:
    return make_history
