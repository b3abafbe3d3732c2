"""Service layer for best-effort live pricing.

Each ticker is looked up concurrently with its own timeout. A lookup that
fails or times out yields a zeroed placeholder for that ticker only; the
batch as a whole never fails.
"""

import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Dict, Iterable, List, Optional

from folioshare.market_data.yahoo_client import Quote, QuoteProvider
from folioshare.server.models.portfolio import Holding, PricedHolding
from folioshare.server.models.prices import TickerPrice

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_WORKERS = 16


class PricingService:
    """Fan-out quote lookups with per-ticker placeholders.

    Attributes:
        quotes: Market-data collaborator
        timeout: Seconds to wait for any single lookup
        max_workers: Upper bound on concurrent lookups
    """

    def __init__(
        self,
        quotes: QuoteProvider,
        timeout: float = DEFAULT_TIMEOUT,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        self.quotes = quotes
        self.timeout = timeout
        self.max_workers = max_workers

    def get_prices(self, tickers: Iterable[str]) -> List[TickerPrice]:
        """
        Price a list of tickers.

        Args:
            tickers: Symbols in request order (duplicates are priced once)

        Returns:
            One TickerPrice per requested ticker, in request order
        """
        requested = [str(t).strip().upper() for t in tickers]
        outcomes = self._lookup_all(requested)

        results = []
        for ticker in requested:
            quote, error = outcomes.get(ticker, (None, "No lookup performed"))
            if quote is None:
                results.append(TickerPrice(ticker=ticker, success=False, error=error))
            else:
                results.append(
                    TickerPrice(
                        ticker=ticker,
                        current_price=round(quote.current_price, 2),
                        change=round(quote.change, 2),
                        change_percent=round(quote.change_percent, 2),
                    )
                )
        return results

    def price_holdings(self, holdings: Iterable[Holding]) -> List[PricedHolding]:
        """
        Decorate holdings with current price, change and total value.

        Holdings keep their order; a failed lookup leaves zeros and a
        ``price_error`` on that holding alone.
        """
        holdings = list(holdings)
        prices = {p.ticker: p for p in self.get_prices(h.ticker for h in holdings)}

        priced = []
        for holding in holdings:
            price = prices[holding.ticker]
            priced.append(
                PricedHolding(
                    **holding.model_dump(),
                    current_price=price.current_price,
                    change=price.change,
                    change_percent=price.change_percent,
                    total_value=round(price.current_price * holding.quantity, 2),
                    price_error=price.error,
                )
            )
        return priced

    def _lookup_all(self, tickers: List[str]) -> Dict[str, tuple]:
        """Run one lookup per distinct ticker; map ticker -> (quote, error)."""
        unique = list(dict.fromkeys(t for t in tickers if t))
        outcomes: Dict[str, tuple] = {t: (None, "Empty ticker") for t in tickers if not t}
        if not unique:
            return outcomes

        workers = min(len(unique), self.max_workers)
        # Lookups beyond the pool size queue behind earlier ones
        deadline = time.monotonic() + self.timeout * math.ceil(len(unique) / workers)

        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = {t: executor.submit(self.quotes.get_quote, t) for t in unique}
            for ticker, future in futures.items():
                remaining = max(0.0, deadline - time.monotonic())
                outcomes[ticker] = self._settle(ticker, future, remaining)
        finally:
            # Timed-out lookups are abandoned, not awaited
            executor.shutdown(wait=False, cancel_futures=True)
        return outcomes

    def _settle(self, ticker: str, future, timeout: float) -> tuple:
        try:
            quote: Optional[Quote] = future.result(timeout=timeout)
            return quote, None
        except FutureTimeoutError:
            logger.warning(f"Price lookup for {ticker} timed out after {self.timeout}s")
            return None, f"Timed out after {self.timeout}s"
        except Exception as e:
            logger.warning(f"Failed to fetch price for {ticker}: {e}")
            return None, str(e)
