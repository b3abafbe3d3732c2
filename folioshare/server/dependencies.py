"""Service wiring and FastAPI dependencies.

Services are built once per application at startup and kept on
``app.state``; endpoints receive them through the dependency functions
below, which tests override.
"""

import logging

from fastapi import FastAPI, Request

from folioshare.config import YahooFinanceConfig
from folioshare.market_data.yahoo_client import YahooFinanceClient
from folioshare.server.config import Settings, settings
from folioshare.server.services.portfolio_service import PortfolioService
from folioshare.server.services.pricing_service import PricingService
from folioshare.server.services.ticker_service import TickerService
from folioshare.server.storage import build_store

logger = logging.getLogger(__name__)


def init_services(app: FastAPI, config: Settings) -> None:
    """Build the store, clients and services and attach them to ``app.state``."""
    quote_client = YahooFinanceClient(
        YahooFinanceConfig(base_url=config.quote_base_url, timeout=config.price_timeout)
    )
    store = build_store(config)
    pricing = PricingService(
        quote_client,
        timeout=config.price_timeout,
        max_workers=config.price_max_workers,
    )

    app.state.quote_client = quote_client
    app.state.store = store
    app.state.pricing_service = pricing
    app.state.ticker_service = TickerService(quote_client)
    app.state.portfolio_service = PortfolioService(store, pricing)


def close_services(app: FastAPI) -> None:
    """Release HTTP sessions held by the clients."""
    quote_client = getattr(app.state, "quote_client", None)
    if quote_client is not None:
        quote_client.close()

    store = getattr(app.state, "store", None)
    client = getattr(getattr(store, "secondary", None), "client", None)
    if client is not None:
        client.close()


def get_portfolio_service(request: Request) -> PortfolioService:
    """FastAPI dependency for the portfolio service."""
    return request.app.state.portfolio_service


def get_pricing_service(request: Request) -> PricingService:
    """FastAPI dependency for the pricing service."""
    return request.app.state.pricing_service


def get_ticker_service(request: Request) -> TickerService:
    """FastAPI dependency for the ticker validation service."""
    return request.app.state.ticker_service


def get_base_url(request: Request) -> str:
    """Base for view/edit links: configured public URL, else the request's."""
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    return str(request.base_url).rstrip("/")
