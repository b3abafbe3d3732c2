"""Business logic services."""

from folioshare.server.services.portfolio_service import PortfolioService
from folioshare.server.services.pricing_service import PricingService
from folioshare.server.services.ticker_service import TickerService

__all__ = ["PortfolioService", "PricingService", "TickerService"]
