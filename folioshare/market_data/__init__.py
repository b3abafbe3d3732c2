"""
Market data package.

Provides the quote source the portfolio service prices holdings with:
- yahoo_client: Yahoo Finance chart/search client and the QuoteProvider protocol
"""

from folioshare.market_data.yahoo_client import (
    MarketDataError,
    Quote,
    QuoteProvider,
    YahooFinanceClient,
)

__all__ = [
    "MarketDataError",
    "Quote",
    "QuoteProvider",
    "YahooFinanceClient",
]
