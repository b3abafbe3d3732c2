"""
Yahoo Finance client for current quotes and symbol search.

This module is the market-data collaborator the portfolio service
consumes. It performs no caching or fallback of its own: callers decide
what a failed lookup means for them.

Endpoints used:
- /v8/finance/chart/{symbol}: regular market price and previous close
- /v1/finance/search?q=: symbol search, used for ticker validation
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Protocol

import requests

from folioshare.api.base_client import BaseAPIClient
from folioshare.config import YahooFinanceConfig

logger = logging.getLogger(__name__)


class MarketDataError(Exception):
    """Raised when a quote or search lookup cannot be completed."""

    pass


@dataclass
class Quote:
    """
    Current price snapshot for one symbol.

    Attributes:
        symbol: Upper-cased ticker symbol
        current_price: Regular market price
        previous_close: Previous session close (falls back to current price)
    """

    symbol: str
    current_price: float
    previous_close: float

    @property
    def change(self) -> float:
        """Absolute change against the previous close."""
        return self.current_price - self.previous_close

    @property
    def change_percent(self) -> float:
        """Percent change against the previous close; 0 when it is unknown."""
        if self.previous_close <= 0:
            return 0.0
        return self.change / self.previous_close * 100


class QuoteProvider(Protocol):
    """Interface the pricing and validation services depend on."""

    def get_quote(self, symbol: str) -> Quote:
        ...

    def search_symbols(self, query: str) -> List[str]:
        ...


class YahooFinanceClient(BaseAPIClient):
    """
    Client for the public Yahoo Finance chart and search APIs.

    Inherited features from BaseAPIClient:
    - HTTP requests with connection pooling
    - Retry logic with exponential backoff
    - Bounded request timeout
    """

    BASE_URL = "https://query1.finance.yahoo.com"

    def __init__(self, config: YahooFinanceConfig):
        """
        Initialize client with configuration.

        Args:
            config: YahooFinanceConfig with endpoint and timeout settings
        """
        super().__init__(
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
            headers={"User-Agent": config.user_agent},
        )
        self.config = config
        if config.base_url:
            self.BASE_URL = config.base_url

    def get_quote(self, symbol: str) -> Quote:
        """
        Fetch the current price and previous close for a symbol.

        Args:
            symbol: Ticker symbol (e.g., "AAPL", "BTC-USD")

        Returns:
            Quote for the symbol

        Raises:
            MarketDataError: If the request fails or carries no price
            ValueError: If symbol is empty
        """
        if not symbol or not isinstance(symbol, str) or not symbol.strip():
            raise ValueError(f"Invalid symbol: {symbol!r}")

        symbol = symbol.strip().upper()
        try:
            response = self.get(f"/v8/finance/chart/{symbol}")
            if response.status_code == 404:
                raise MarketDataError(f"Unknown symbol: {symbol}")
            if response.status_code == 429:
                raise MarketDataError("Rate limit exceeded by quote source")
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise MarketDataError(f"Quote request failed for {symbol}: {e}") from e
        except ValueError as e:
            raise MarketDataError(f"Invalid JSON in quote response for {symbol}: {e}") from e

        return self._parse_chart_response(data, symbol)

    def _parse_chart_response(self, data: dict[str, Any], symbol: str) -> Quote:
        """
        Extract a Quote from a chart response.

        Price fields live in ``chart.result[0].meta``; ``previousClose`` is
        missing for some instruments, in which case ``chartPreviousClose``
        and finally the current price itself stand in.
        """
        results = (data.get("chart") or {}).get("result") or []
        if not results:
            raise MarketDataError(f"No price data found for {symbol}")

        meta = results[0].get("meta") or {}
        current = meta.get("regularMarketPrice")
        if current is None:
            raise MarketDataError(f"No price data found for {symbol}")

        previous = meta.get("previousClose") or meta.get("chartPreviousClose") or current
        return Quote(
            symbol=symbol,
            current_price=float(current),
            previous_close=float(previous),
        )

    def search_symbols(self, query: str) -> List[str]:
        """
        Search for symbols matching a query.

        Args:
            query: Free-text query, usually a ticker

        Returns:
            Upper-cased symbols from the search results, in ranking order

        Raises:
            MarketDataError: If the search request fails
        """
        try:
            response = self.get("/v1/finance/search", params={"q": query})
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise MarketDataError(f"Symbol search failed for {query}: {e}") from e
        except ValueError as e:
            raise MarketDataError(f"Invalid JSON in search response: {e}") from e

        if not isinstance(data, dict):
            raise MarketDataError(f"Unexpected search response for {query}")
        quotes = data.get("quotes") or []
        if not isinstance(quotes, list):
            raise MarketDataError(f"Unexpected search response for {query}")

        return [
            str(q["symbol"]).upper()
            for q in quotes
            if isinstance(q, dict) and q.get("symbol")
        ]
