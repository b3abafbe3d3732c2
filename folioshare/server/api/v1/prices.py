"""Price lookup and ticker validation endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from folioshare.server.dependencies import get_pricing_service, get_ticker_service
from folioshare.server.models.prices import PriceRequest, PriceResponse, TickerValidation
from folioshare.server.services.pricing_service import PricingService
from folioshare.server.services.ticker_service import TickerService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["market data"])


@router.post(
    "/get-prices",
    response_model=PriceResponse,
    summary="Price a list of tickers",
    description="Tickers are priced concurrently; failures yield zeroed entries",
)
def get_prices(
    body: PriceRequest,
    pricing: PricingService = Depends(get_pricing_service),
) -> PriceResponse:
    """Price tickers independently of any stored portfolio.

    Example:
        >>> POST /api/v1/get-prices
        >>> {"tickers": ["AAPL", "BTC-USD"]}
    """
    return PriceResponse(prices=pricing.get_prices(body.tickers))


@router.get(
    "/validate-ticker/{ticker}",
    response_model=TickerValidation,
    summary="Check whether a ticker looks tradeable",
    description="Advisory only; falls back to a format check when the quote source is down",
)
def validate_ticker(
    ticker: str,
    category: Optional[str] = Query(None, description="Holding category, e.g. 'Crypto'"),
    tickers: TickerService = Depends(get_ticker_service),
) -> TickerValidation:
    """Validate a ticker against the quote source's symbol search."""
    return tickers.validate(ticker, category=category)
