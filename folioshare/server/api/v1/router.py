"""API v1 router.

Mounts the portfolio, edit-loader and market-data routers under
``/api/v1`` and serves system information.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status

from folioshare.server.api.v1 import edit, portfolios, prices
from folioshare.server.config import settings
from folioshare.server.models.common import InfoResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["v1"],
)

router.include_router(portfolios.router)
router.include_router(edit.router)
router.include_router(prices.router)


@router.get(
    "/info",
    response_model=InfoResponse,
    status_code=status.HTTP_200_OK,
    summary="Get system information",
    description="Returns version and the configured storage tiers",
)
def get_info(request: Request) -> InfoResponse:
    """Get system information endpoint."""
    store = getattr(request.app.state, "store", None)
    primary = getattr(store, "primary", None)
    secondary = getattr(store, "secondary", None)

    return InfoResponse(
        app_name=settings.app_name,
        version=settings.version,
        status="running",
        primary_backend=primary.name if primary is not None else None,
        secondary_backend=secondary.name if secondary is not None else None,
        timestamp=datetime.now(timezone.utc),
    )
