"""Pytest fixtures for FastAPI server tests.

Provides an in-memory portfolio store, a controllable clock, a stub quote
source and a TestClient whose service dependencies use them.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Generator, Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient

from folioshare.market_data.yahoo_client import MarketDataError, Quote
from folioshare.server.dependencies import (
    get_portfolio_service,
    get_pricing_service,
    get_ticker_service,
)
from folioshare.server.main import app
from folioshare.server.services.portfolio_service import PortfolioService
from folioshare.server.services.pricing_service import PricingService
from folioshare.server.services.ticker_service import TickerService
from folioshare.server.storage.backends import MemoryBackend
from folioshare.server.storage.tiered import TieredPortfolioStore

CREATED_AT = datetime(2026, 3, 2, 15, 30, tzinfo=timezone.utc)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = CREATED_AT):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class StubQuoteProvider:
    """Quote source returning canned prices.

    Tickers in ``failing`` raise MarketDataError; unknown tickers too.
    """

    def __init__(
        self,
        quotes: Optional[Dict[str, Quote]] = None,
        failing: Iterable[str] = (),
        symbols: Optional[List[str]] = None,
        search_fails: bool = False,
    ):
        self.quotes = quotes or {}
        self.failing = set(failing)
        self.symbols = symbols or []
        self.search_fails = search_fails
        self.calls: List[str] = []

    def get_quote(self, symbol: str) -> Quote:
        self.calls.append(symbol)
        if symbol in self.failing or symbol not in self.quotes:
            raise MarketDataError(f"No price data found for {symbol}")
        return self.quotes[symbol]

    def search_symbols(self, query: str) -> List[str]:
        if self.search_fails:
            raise MarketDataError("Symbol search failed")
        return list(self.symbols)


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at a fixed creation instant."""
    return FakeClock()


@pytest.fixture
def primary() -> MemoryBackend:
    """In-process primary tier."""
    return MemoryBackend()


@pytest.fixture
def secondary() -> MemoryBackend:
    """Second in-process tier standing in for a durable backend."""
    return MemoryBackend()


@pytest.fixture
def store(primary: MemoryBackend, secondary: MemoryBackend, clock: FakeClock) -> TieredPortfolioStore:
    """Two-tier store over in-memory backends."""
    return TieredPortfolioStore(primary=primary, secondary=secondary, clock=clock)


@pytest.fixture
def quotes() -> StubQuoteProvider:
    """Quote source pricing AAPL at 150 and MSFT at 400."""
    return StubQuoteProvider(
        quotes={
            "AAPL": Quote(symbol="AAPL", current_price=150.0, previous_close=148.0),
            "MSFT": Quote(symbol="MSFT", current_price=400.0, previous_close=410.0),
        },
        symbols=["AAPL", "AAPL.MX"],
    )


@pytest.fixture
def pricing(quotes: StubQuoteProvider) -> PricingService:
    return PricingService(quotes, timeout=2.0)


@pytest.fixture
def ticker_service(quotes: StubQuoteProvider) -> TickerService:
    return TickerService(quotes)


@pytest.fixture
def service(store: TieredPortfolioStore, pricing: PricingService, clock: FakeClock) -> PortfolioService:
    return PortfolioService(store, pricing, clock=clock)


@pytest.fixture
def client(
    service: PortfolioService,
    pricing: PricingService,
    ticker_service: TickerService,
) -> Generator[TestClient, None, None]:
    """TestClient whose services use the fixtures above.

    Example:
        >>> def test_endpoint(client):
        >>>     response = client.get("/health")
        >>>     assert response.status_code == 200
    """
    app.dependency_overrides[get_portfolio_service] = lambda: service
    app.dependency_overrides[get_pricing_service] = lambda: pricing
    app.dependency_overrides[get_ticker_service] = lambda: ticker_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def client_no_overrides() -> Generator[TestClient, None, None]:
    """TestClient with the services built from default settings."""
    with TestClient(app) as test_client:
        yield test_client
