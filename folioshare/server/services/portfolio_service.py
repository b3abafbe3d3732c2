"""Service layer for shared portfolios.

Coordinates identifier minting, the expiration policy, edit-secret checks
and the tiered store, and hands pricing to the PricingService.

Expired portfolios are deleted lazily: the first read that sees a past
``expiresAt`` removes the record and reports it as not found.

Updates are read-check-then-write with no version token, so concurrent
updates of one portfolio race and the last writer wins.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from folioshare.server.exceptions import (
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from folioshare.server.models.portfolio import (
    EditablePortfolio,
    Holding,
    PortfolioCreate,
    PortfolioLinks,
    PortfolioRecord,
    PortfolioUpdate,
    PortfolioView,
    PricedPortfolioView,
)
from folioshare.server.services.pricing_service import PricingService
from folioshare.server.storage.tiered import TieredPortfolioStore
from folioshare.utils.date_utils import compute_expires_at, is_expired, seconds_until
from folioshare.utils.identifiers import (
    generate_edit_secret,
    generate_portfolio_id,
    secrets_match,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def strip_blank_holdings(holdings: list[Holding]) -> list[Holding]:
    """Drop holdings whose ticker is empty or whitespace, keeping order."""
    return [h for h in holdings if h.ticker.strip()]


class PortfolioService:
    """Create, view, edit and delete shared portfolios.

    Attributes:
        store: Tiered portfolio store
        pricing: Best-effort price decoration
        clock: Source of "now", UTC-aware
    """

    def __init__(
        self,
        store: TieredPortfolioStore,
        pricing: PricingService,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.pricing = pricing
        self.clock = clock

    # --- Links ---

    @staticmethod
    def build_links(record: PortfolioRecord, base_url: str) -> PortfolioLinks:
        """View and edit links; only the edit link embeds the secret."""
        base_url = base_url.rstrip("/")
        return PortfolioLinks(
            id=record.id,
            view_url=f"{base_url}/view/{record.id}",
            edit_url=f"{base_url}/edit/{record.id}/{record.edit_secret}",
        )

    # --- Create ---

    def create_portfolio(self, data: PortfolioCreate, base_url: str) -> PortfolioLinks:
        """
        Mint a new portfolio and persist it.

        Args:
            data: Creation payload; an empty holdings list is allowed
            base_url: Base of the returned view/edit links

        Returns:
            Links for viewing and editing the new portfolio

        Raises:
            StorageError: If the record could not be stored
        """
        now = self.clock()
        record = PortfolioRecord(
            id=generate_portfolio_id(),
            edit_secret=generate_edit_secret(),
            holdings=strip_blank_holdings(data.holdings),
            categories=data.categories,
            category_order=data.category_order,
            duration=data.duration,
            expires_at=compute_expires_at(data.duration, now),
            created_at=now,
            updated_at=now,
            email=data.email,
        )

        self._persist(record, now)
        logger.info(
            f"Created portfolio {record.id} with {len(record.holdings)} holdings "
            f"(duration={record.duration})"
        )
        return self.build_links(record, base_url)

    # --- Read ---

    def get_portfolio(self, portfolio_id: str) -> PortfolioView:
        """
        Read-only view of a live portfolio.

        Raises:
            ValidationError: If the id is missing
            NotFoundError: If the portfolio is absent or expired
        """
        record = self._load_live(portfolio_id)
        return PortfolioView(
            id=record.id,
            holdings=record.holdings,
            categories=record.categories,
            category_order=record.category_order,
            duration=record.duration,
            created_at=record.created_at,
            updated_at=record.updated_at,
            expires_at=record.expires_at,
        )

    def get_priced_portfolio(self, portfolio_id: str) -> PricedPortfolioView:
        """
        Holdings of a live portfolio decorated with current prices.

        Price failures degrade per holding and never fail the call.

        Raises:
            ValidationError: If the id is missing
            NotFoundError: If the portfolio is absent or expired
        """
        record = self._load_live(portfolio_id)
        return PricedPortfolioView(
            id=record.id,
            holdings=self.pricing.price_holdings(record.holdings),
            categories=record.categories,
            category_order=record.category_order,
        )

    def load_for_edit(self, portfolio_id: str, edit_secret: str) -> EditablePortfolio:
        """
        Full record for the editor.

        Raises:
            ValidationError: If the id or secret is missing
            NotFoundError: If the portfolio is absent or expired
            ForbiddenError: If the secret does not match
        """
        record = self._authorize(portfolio_id, edit_secret)
        return EditablePortfolio(
            id=record.id,
            holdings=record.holdings,
            categories=record.categories,
            category_order=record.category_order,
            duration=record.duration,
            email=record.email,
            created_at=record.created_at,
            updated_at=record.updated_at,
            expires_at=record.expires_at,
        )

    # --- Write ---

    def update_portfolio(
        self,
        portfolio_id: str,
        edit_secret: str,
        data: PortfolioUpdate,
        base_url: str,
    ) -> PortfolioLinks:
        """
        Replace the editable fields of a portfolio.

        Provided fields replace the stored ones wholesale. The expiry is
        recomputed from the (new or kept) duration, starting now.

        Raises:
            ValidationError: If the id or secret is missing
            NotFoundError: If the portfolio is absent or expired
            ForbiddenError: If the secret does not match
            StorageError: If the record could not be stored
        """
        record = self._authorize(portfolio_id, edit_secret)
        now = self.clock()

        changes = {"updated_at": now}
        if data.holdings is not None:
            changes["holdings"] = strip_blank_holdings(data.holdings)
        if data.categories is not None:
            changes["categories"] = data.categories
        if data.category_order is not None:
            changes["category_order"] = data.category_order
        if data.email is not None:
            changes["email"] = data.email

        duration = data.duration if data.duration is not None else record.duration
        changes["duration"] = duration
        changes["expires_at"] = compute_expires_at(duration, now)

        updated = record.model_copy(update=changes)
        self._persist(updated, now)
        logger.info(f"Updated portfolio {updated.id}")
        return self.build_links(updated, base_url)

    def delete_portfolio(self, portfolio_id: str, edit_secret: str) -> None:
        """
        Delete a portfolio from every tier.

        Raises:
            ValidationError: If the id or secret is missing
            NotFoundError: If the portfolio is absent or expired
            ForbiddenError: If the secret does not match
        """
        self._authorize(portfolio_id, edit_secret)
        self.store.delete(portfolio_id)
        logger.info(f"Deleted portfolio {portfolio_id}")

    # --- Helpers ---

    def _persist(self, record: PortfolioRecord, now: datetime) -> None:
        self.store.save(record.id, record, ttl=seconds_until(record.expires_at, now))

    def _load_live(self, portfolio_id: Optional[str]) -> PortfolioRecord:
        if not portfolio_id or not portfolio_id.strip():
            raise ValidationError("Portfolio ID required")

        record = self.store.get(portfolio_id)
        if record is None:
            raise NotFoundError("Portfolio not found")

        if is_expired(record.expires_at, self.clock()):
            logger.info(f"Portfolio {portfolio_id} expired at {record.expires_at}; removing")
            try:
                self.store.delete(portfolio_id)
            except StorageError as e:
                logger.warning(f"Could not remove expired portfolio {portfolio_id}: {e}")
            raise NotFoundError("Portfolio not found")

        return record

    def _authorize(self, portfolio_id: Optional[str], edit_secret: Optional[str]) -> PortfolioRecord:
        if not portfolio_id or not edit_secret:
            raise ValidationError("Portfolio ID and edit secret required")

        record = self._load_live(portfolio_id)
        if not secrets_match(record.edit_secret, edit_secret):
            logger.warning(f"Rejected edit secret for portfolio {portfolio_id}")
            raise ForbiddenError("Invalid edit secret")
        return record
