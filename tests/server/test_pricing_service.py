"""Tests for PricingService fan-out and placeholders."""

import threading

from folioshare.market_data.yahoo_client import Quote
from folioshare.server.models.portfolio import Holding
from folioshare.server.services.pricing_service import PricingService


class SlowQuoteProvider:
    """Quote source that blocks on chosen tickers until released."""

    def __init__(self, slow):
        self.slow = set(slow)
        self.release = threading.Event()

    def get_quote(self, symbol):
        if symbol in self.slow:
            self.release.wait(5)
        return Quote(symbol=symbol, current_price=10.0, previous_close=8.0)

    def search_symbols(self, query):
        return []


class TestGetPrices:
    """Batch price lookups."""

    def test_successful_lookup_is_rounded(self, quotes):
        quotes.quotes["ODD"] = Quote(symbol="ODD", current_price=12.3456, previous_close=11.0)
        pricing = PricingService(quotes)

        (price,) = pricing.get_prices(["ODD"])

        assert price.success is True
        assert price.current_price == 12.35
        assert price.change == 1.35
        assert price.change_percent == 12.23

    def test_failure_is_isolated(self, pricing):
        aapl, xyz = pricing.get_prices(["AAPL", "XYZ"])

        assert aapl.current_price == 150.0
        assert aapl.success is True
        assert xyz.current_price == 0
        assert xyz.change_percent == 0
        assert xyz.success is False
        assert xyz.error

    def test_order_and_duplicates(self, pricing, quotes):
        prices = pricing.get_prices(["msft", "AAPL", "MSFT"])

        assert [p.ticker for p in prices] == ["MSFT", "AAPL", "MSFT"]
        assert sorted(quotes.calls) == ["AAPL", "MSFT"]

    def test_blank_ticker_is_not_looked_up(self, pricing, quotes):
        (price,) = pricing.get_prices(["  "])

        assert price.success is False
        assert quotes.calls == []

    def test_empty_request(self, pricing):
        assert pricing.get_prices([]) == []

    def test_timeout_yields_placeholder(self):
        provider = SlowQuoteProvider(slow=["SLOW"])
        pricing = PricingService(provider, timeout=0.2)
        try:
            fast, slow = pricing.get_prices(["FAST", "SLOW"])
        finally:
            provider.release.set()

        assert fast.current_price == 10.0
        assert slow.success is False
        assert slow.current_price == 0
        assert "Timed out" in slow.error


class TestPriceHoldings:
    """Holding decoration."""

    def test_total_value(self, pricing):
        priced = pricing.price_holdings(
            [
                Holding(ticker="AAPL", quantity=2.5, category="Tech"),
                Holding(ticker="XYZ", quantity=4),
            ]
        )

        aapl, xyz = priced
        assert aapl.category == "Tech"
        assert aapl.total_value == 375.0
        assert aapl.price_error is None
        assert xyz.total_value == 0
        assert xyz.price_error is not None

    def test_serialized_fields(self, pricing):
        (priced,) = pricing.price_holdings([Holding(ticker="MSFT", quantity=1)])

        data = priced.model_dump(by_alias=True)
        assert data["currentPrice"] == 400.0
        assert data["changePercent"] == -2.44
        assert data["totalValue"] == 400.0
