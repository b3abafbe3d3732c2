"""Pydantic models for shared portfolios.

``PortfolioRecord`` is the persisted form: it round-trips through JSON
losslessly (timestamps as ISO-8601) and is what every storage backend
holds. The request and response schemas around it never carry the edit
secret back to a caller.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from folioshare.server.models.common import CamelModel
from folioshare.utils.date_utils import Duration
from folioshare.utils.validation import normalize_ticker


class Holding(CamelModel):
    """One position in a portfolio.

    Blank tickers are accepted here and dropped by the service before a
    portfolio is persisted.

    Attributes:
        ticker: Symbol, stripped and upper-cased
        quantity: Units held
        category: Optional category label
    """

    ticker: str = Field(default="", description="Ticker symbol")
    quantity: float = Field(default=0.0, ge=0, description="Units held")
    category: Optional[str] = Field(default=None, description="Category label")

    @field_validator("ticker", mode="before")
    @classmethod
    def normalize(cls, v: Any) -> str:
        return normalize_ticker(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def blank_quantity_is_zero(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return 0.0
        return v


class PortfolioRecord(CamelModel):
    """Stored portfolio, including its edit secret.

    Attributes:
        id: Public identifier
        edit_secret: Bearer token authorizing edits
        holdings: Ordered holdings (order is display-significant)
        categories: Category name -> display attributes
        category_order: Display order of category names
        duration: Lifetime selector recorded at creation/update
        expires_at: Absolute expiry, None for never
        created_at: Creation timestamp
        updated_at: Last update timestamp
        email: Optional contact address
    """

    id: str
    edit_secret: str
    holdings: List[Holding] = Field(default_factory=list)
    categories: Dict[str, Any] = Field(default_factory=dict)
    category_order: List[str] = Field(default_factory=list)
    duration: str = Duration.FOREVER.value
    expires_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    email: Optional[str] = None


class PortfolioCreate(CamelModel):
    """Request schema for creating a portfolio.

    Example:
        >>> PortfolioCreate(
        >>>     holdings=[{"ticker": "AAPL", "quantity": 10, "category": "Tech"}],
        >>>     categories={"Tech": {"color": "#3b82f6"}},
        >>>     categoryOrder=["Tech"],
        >>>     duration="1 Week",
        >>> )
    """

    holdings: List[Holding] = Field(..., description="Holdings, possibly empty")
    categories: Dict[str, Any] = Field(default_factory=dict)
    category_order: List[str] = Field(default_factory=list)
    duration: str = Field(
        default=Duration.FOREVER.value,
        description="One of '1 Day', '1 Week', '1 Month', 'Forever'",
    )
    email: Optional[str] = Field(default=None, max_length=320)

    model_config = {
        "json_schema_extra": {
            "example": {
                "holdings": [
                    {"ticker": "AAPL", "quantity": 10, "category": "Tech"},
                    {"ticker": "BTC-USD", "quantity": 0.5, "category": "Crypto"},
                ],
                "categories": {"Tech": {"color": "#3b82f6"}, "Crypto": {"color": "#f59e0b"}},
                "categoryOrder": ["Tech", "Crypto"],
                "duration": "1 Week",
                "email": None,
            }
        }
    }


class PortfolioUpdate(CamelModel):
    """Request schema for updating a portfolio.

    Provided fields replace the stored ones wholesale; omitted fields are
    kept.
    """

    holdings: Optional[List[Holding]] = None
    categories: Optional[Dict[str, Any]] = None
    category_order: Optional[List[str]] = None
    duration: Optional[str] = None
    email: Optional[str] = Field(default=None, max_length=320)


class PortfolioLinks(CamelModel):
    """Links returned after a create or update."""

    success: bool = True
    id: str
    view_url: str
    edit_url: str


class PortfolioView(CamelModel):
    """Read-only view of a portfolio, as served to anyone with the id."""

    id: str
    holdings: List[Holding]
    categories: Dict[str, Any]
    category_order: List[str]
    duration: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class PricedHolding(Holding):
    """Holding decorated with live price data.

    On a failed lookup the price fields are zero and ``price_error``
    says why.
    """

    current_price: float = 0.0
    change: float = 0.0
    change_percent: float = 0.0
    total_value: float = 0.0
    price_error: Optional[str] = None


class PricedPortfolioView(CamelModel):
    """Price-enriched holdings of a portfolio."""

    id: str
    holdings: List[PricedHolding]
    categories: Dict[str, Any]
    category_order: List[str]


class EditablePortfolio(CamelModel):
    """Full record for the editor, minus the secret."""

    id: str
    holdings: List[Holding]
    categories: Dict[str, Any]
    category_order: List[str]
    duration: str
    email: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class EditResponse(CamelModel):
    """Response of the edit loader."""

    success: bool = True
    portfolio: EditablePortfolio


class DeleteResponse(CamelModel):
    """Acknowledgment of a delete."""

    success: bool = True
    message: str = "Portfolio deleted successfully"
