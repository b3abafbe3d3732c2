"""Pydantic request and response models."""

from folioshare.server.models.common import ErrorResponse, HealthResponse, InfoResponse
from folioshare.server.models.portfolio import (
    DeleteResponse,
    EditablePortfolio,
    EditResponse,
    Holding,
    PortfolioCreate,
    PortfolioLinks,
    PortfolioRecord,
    PortfolioUpdate,
    PortfolioView,
    PricedHolding,
    PricedPortfolioView,
)
from folioshare.server.models.prices import (
    PriceRequest,
    PriceResponse,
    TickerPrice,
    TickerValidation,
)

__all__ = [
    # Common models
    "HealthResponse",
    "InfoResponse",
    "ErrorResponse",
    # Portfolio models
    "Holding",
    "PortfolioRecord",
    "PortfolioCreate",
    "PortfolioUpdate",
    "PortfolioLinks",
    "PortfolioView",
    "PricedHolding",
    "PricedPortfolioView",
    "EditablePortfolio",
    "EditResponse",
    "DeleteResponse",
    # Price models
    "PriceRequest",
    "PriceResponse",
    "TickerPrice",
    "TickerValidation",
]
