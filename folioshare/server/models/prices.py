"""Pydantic models for price lookups and ticker validation."""

from typing import List, Literal, Optional

from pydantic import Field

from folioshare.server.models.common import CamelModel


class PriceRequest(CamelModel):
    """Batch price lookup request."""

    tickers: List[str] = Field(..., description="Symbols to price")


class TickerPrice(CamelModel):
    """Price result for one ticker; zeroed with ``success=False`` on failure."""

    ticker: str
    current_price: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    success: bool = True
    error: Optional[str] = None


class PriceResponse(CamelModel):
    """Batch price lookup response."""

    success: bool = True
    prices: List[TickerPrice]


class TickerValidation(CamelModel):
    """Best-effort ticker check.

    Attributes:
        valid: Whether the ticker looks tradeable
        ticker: Upper-cased ticker
        source: "market" when the quote source answered, "format" when
            the offline pattern decided
    """

    valid: bool
    ticker: str
    source: Literal["market", "format"]
