"""Edit-loader endpoint: the full record behind an edit link."""

import logging

from fastapi import APIRouter, Depends

from folioshare.server.dependencies import get_portfolio_service
from folioshare.server.models.common import ErrorResponse
from folioshare.server.models.portfolio import EditResponse
from folioshare.server.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/edit", tags=["edit"])


@router.get(
    "/{portfolio_id}/{edit_secret}",
    response_model=EditResponse,
    summary="Load a portfolio for editing",
    responses={
        403: {"model": ErrorResponse, "description": "Invalid edit secret"},
        404: {"model": ErrorResponse, "description": "Portfolio not found or expired"},
    },
)
def load_portfolio_for_edit(
    portfolio_id: str,
    edit_secret: str,
    service: PortfolioService = Depends(get_portfolio_service),
) -> EditResponse:
    """Return every editable field; the secret itself is never echoed."""
    return EditResponse(portfolio=service.load_for_edit(portfolio_id, edit_secret))
