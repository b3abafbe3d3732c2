"""Best-effort ticker validation.

Answers are advisory: the editor uses them to flag typos, never to
reject a portfolio.
"""

import logging
from typing import Optional

from folioshare.market_data.yahoo_client import MarketDataError, QuoteProvider
from folioshare.server.models.prices import TickerValidation
from folioshare.utils.validation import is_plausible_ticker, normalize_ticker

logger = logging.getLogger(__name__)

# Listing suffixes accepted as the same instrument
LISTING_SUFFIXES = (".TO", ".L")
CRYPTO_CATEGORY = "crypto"


class TickerService:
    """Validate tickers against the quote source's symbol search."""

    def __init__(self, quotes: QuoteProvider):
        self.quotes = quotes

    def validate(self, ticker: str, category: Optional[str] = None) -> TickerValidation:
        """
        Check whether a ticker names a listed instrument.

        Accepts an exact symbol match, a listing variant (``.TO``, ``.L``),
        or a result whose root before a ``.``/``-`` suffix equals the
        ticker. For the crypto category the ``-USD`` pair also counts.
        When the search itself fails the offline format rule decides.

        Args:
            ticker: Ticker as typed by the user
            category: Optional category label of the holding

        Returns:
            Validation result with the upper-cased ticker
        """
        ticker = normalize_ticker(ticker)
        candidates = {ticker}
        candidates.update(ticker + suffix for suffix in LISTING_SUFFIXES)
        if category and category.strip().lower() == CRYPTO_CATEGORY and not ticker.endswith("-USD"):
            candidates.add(f"{ticker}-USD")

        try:
            symbols = self.quotes.search_symbols(ticker)
        except MarketDataError as e:
            logger.warning(f"Ticker search failed for {ticker}, using format check: {e}")
            return TickerValidation(
                valid=is_plausible_ticker(ticker), ticker=ticker, source="format"
            )

        valid = any(
            symbol in candidates or _root(symbol) == ticker for symbol in symbols
        )
        return TickerValidation(valid=valid, ticker=ticker, source="market")


def _root(symbol: str) -> str:
    for i, ch in enumerate(symbol):
        if ch in ".-":
            return symbol[:i]
    return symbol
