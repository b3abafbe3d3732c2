"""Portfolio API endpoints.

Create, view and price portfolios by public id; update and delete them
with the edit secret carried in the path.
"""

import logging

from fastapi import APIRouter, Depends, status

from folioshare.server.dependencies import get_base_url, get_portfolio_service
from folioshare.server.models.common import ErrorResponse
from folioshare.server.models.portfolio import (
    DeleteResponse,
    PortfolioCreate,
    PortfolioLinks,
    PortfolioUpdate,
    PortfolioView,
    PricedPortfolioView,
)
from folioshare.server.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portfolios", tags=["portfolios"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Portfolio not found or expired"}}
SECRET_CHECKED = {
    **NOT_FOUND,
    403: {"model": ErrorResponse, "description": "Invalid edit secret"},
}


@router.post(
    "",
    response_model=PortfolioLinks,
    status_code=status.HTTP_201_CREATED,
    summary="Create a shared portfolio",
    description="Stores holdings under a new id and returns view and edit links",
    responses={500: {"model": ErrorResponse, "description": "Storage failure"}},
)
def create_portfolio(
    portfolio: PortfolioCreate,
    service: PortfolioService = Depends(get_portfolio_service),
    base_url: str = Depends(get_base_url),
) -> PortfolioLinks:
    """Create a new portfolio.

    Holdings with a blank ticker are dropped before the portfolio is stored.

    Example:
        >>> POST /api/v1/portfolios
        >>> {
        >>>     "holdings": [{"ticker": "AAPL", "quantity": 10, "category": "Tech"}],
        >>>     "categories": {"Tech": {"color": "#3b82f6"}},
        >>>     "categoryOrder": ["Tech"],
        >>>     "duration": "1 Week"
        >>> }
    """
    return service.create_portfolio(portfolio, base_url)


@router.get(
    "/{portfolio_id}",
    response_model=PortfolioView,
    summary="View a portfolio",
    responses=NOT_FOUND,
)
def get_portfolio(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PortfolioView:
    """Get a portfolio's holdings and categories without prices."""
    return service.get_portfolio(portfolio_id)


@router.get(
    "/{portfolio_id}/prices",
    response_model=PricedPortfolioView,
    summary="View a portfolio with live prices",
    description="Per-ticker price failures yield zeroed placeholders, never an error",
    responses=NOT_FOUND,
)
def get_portfolio_prices(
    portfolio_id: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> PricedPortfolioView:
    """Get a portfolio's holdings decorated with current prices."""
    return service.get_priced_portfolio(portfolio_id)


@router.put(
    "/{portfolio_id}/{edit_secret}",
    response_model=PortfolioLinks,
    summary="Update a portfolio",
    responses=SECRET_CHECKED,
)
def update_portfolio(
    portfolio_id: str,
    edit_secret: str,
    portfolio: PortfolioUpdate,
    service: PortfolioService = Depends(get_portfolio_service),
    base_url: str = Depends(get_base_url),
) -> PortfolioLinks:
    """Replace holdings, categories, order and duration of a portfolio.

    Example:
        >>> PUT /api/v1/portfolios/Xk3v9QpL2aBc/<secret>
        >>> {"holdings": [{"ticker": "MSFT", "quantity": 3}], "duration": "1 Month"}
    """
    return service.update_portfolio(portfolio_id, edit_secret, portfolio, base_url)


@router.delete(
    "/{portfolio_id}/{edit_secret}",
    response_model=DeleteResponse,
    summary="Delete a portfolio",
    responses=SECRET_CHECKED,
)
def delete_portfolio(
    portfolio_id: str,
    edit_secret: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> DeleteResponse:
    """Delete a portfolio from every storage tier."""
    service.delete_portfolio(portfolio_id, edit_secret)
    return DeleteResponse()
