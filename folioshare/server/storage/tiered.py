"""Two-tier portfolio store.

A fast primary tier (normally the in-process MemoryBackend) sits in front
of an optional durable secondary tier. Callers see one store whether zero,
one or two tiers are configured:

- save: written to every configured tier; a primary failure is logged and
  never blocks the secondary write; a secondary failure evicts the key
  from the primary so the two tiers never disagree
- get: primary first; on a miss the secondary is read and, on a hit, the
  primary is repopulated before the record is returned
- delete: removed from every configured tier; absence is not an error

Primary failures are treated as misses or no-ops. Secondary failures
surface as ``StorageError``. The record's own ``expiresAt`` stays the
source of truth for expiry; backend TTLs are only hints.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from folioshare.server.exceptions import StorageError
from folioshare.server.models.portfolio import PortfolioRecord
from folioshare.server.storage.backends import StorageBackend
from folioshare.utils.date_utils import seconds_until

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TieredPortfolioStore:
    """Portfolio store over a primary and an optional secondary backend.

    The instance is owned by whoever builds it (the application factory,
    or a test) and lives for the lifetime of that owner.

    Attributes:
        primary: Fast tier checked first, may be None
        secondary: Durable tier behind it, may be None
    """

    def __init__(
        self,
        primary: Optional[StorageBackend] = None,
        secondary: Optional[StorageBackend] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.primary = primary
        self.secondary = secondary
        self._clock = clock

        if primary is None and secondary is None:
            logger.warning("Portfolio store has no backends; nothing will persist")

    @property
    def backend_names(self) -> List[str]:
        """Names of configured tiers, primary first."""
        return [b.name for b in (self.primary, self.secondary) if b is not None]

    def _ttl_for(self, record: PortfolioRecord) -> Optional[int]:
        return seconds_until(record.expires_at, self._clock())

    def save(self, portfolio_id: str, record: PortfolioRecord, ttl: Optional[int] = None) -> None:
        """
        Persist a record to every configured tier.

        Args:
            portfolio_id: Key to store under
            record: Portfolio to persist
            ttl: Expiry hint in seconds for tiers with native expiration

        Raises:
            StorageError: If the secondary write fails, or no tier accepted it
        """
        document = record.model_dump(mode="json", by_alias=True)
        stored = False

        if self.primary is not None:
            try:
                self.primary.save(
                    portfolio_id, document, ttl=ttl if self.primary.supports_ttl else None
                )
                stored = True
            except Exception as e:
                logger.warning(
                    f"Primary backend '{self.primary.name}' failed to save {portfolio_id}: {e}"
                )

        if self.secondary is not None:
            try:
                self.secondary.save(
                    portfolio_id, document, ttl=ttl if self.secondary.supports_ttl else None
                )
                stored = True
            except Exception as e:
                logger.error(
                    f"Secondary backend '{self.secondary.name}' failed to save {portfolio_id}: {e}"
                )
                # The primary must not serve a write the durable tier rejected
                self._evict_primary(portfolio_id)
                raise StorageError(f"Failed to save portfolio {portfolio_id}") from e

        if not stored and self.backend_names:
            raise StorageError(f"Failed to save portfolio {portfolio_id}")

    def get(self, portfolio_id: str) -> Optional[PortfolioRecord]:
        """
        Look a record up, primary tier first.

        Args:
            portfolio_id: Key to look up

        Returns:
            The record, or None when no tier holds it

        Raises:
            StorageError: If the secondary tier fails or holds an unreadable record
        """
        if self.primary is not None:
            try:
                document = self.primary.get(portfolio_id)
                if document is not None:
                    return PortfolioRecord.model_validate(document)
            except Exception as e:
                logger.warning(
                    f"Primary backend '{self.primary.name}' failed to read {portfolio_id}: {e}"
                )

        if self.secondary is None:
            return None

        try:
            document = self.secondary.get(portfolio_id)
        except Exception as e:
            logger.error(
                f"Secondary backend '{self.secondary.name}' failed to read {portfolio_id}: {e}"
            )
            raise StorageError(f"Failed to load portfolio {portfolio_id}") from e

        if document is None:
            return None

        try:
            record = PortfolioRecord.model_validate(document)
        except PydanticValidationError as e:
            raise StorageError(f"Stored portfolio {portfolio_id} is unreadable") from e

        logger.info(f"Loaded {portfolio_id} from '{self.secondary.name}'")
        self._repopulate_primary(portfolio_id, record)
        return record

    def _repopulate_primary(self, portfolio_id: str, record: PortfolioRecord) -> None:
        if self.primary is None:
            return
        try:
            self.primary.save(
                portfolio_id,
                record.model_dump(mode="json", by_alias=True),
                ttl=self._ttl_for(record) if self.primary.supports_ttl else None,
            )
            logger.debug(f"Repopulated '{self.primary.name}' with {portfolio_id}")
        except Exception as e:
            logger.warning(f"Could not repopulate primary with {portfolio_id}: {e}")

    def _evict_primary(self, portfolio_id: str) -> None:
        if self.primary is None:
            return
        try:
            self.primary.delete(portfolio_id)
        except Exception as e:
            logger.warning(
                f"Primary backend '{self.primary.name}' failed to delete {portfolio_id}: {e}"
            )

    def delete(self, portfolio_id: str) -> None:
        """
        Remove a record from every configured tier.

        Raises:
            StorageError: If the secondary delete fails
        """
        self._evict_primary(portfolio_id)

        if self.secondary is not None:
            try:
                self.secondary.delete(portfolio_id)
            except Exception as e:
                logger.error(
                    f"Secondary backend '{self.secondary.name}' failed to delete {portfolio_id}: {e}"
                )
                raise StorageError(f"Failed to delete portfolio {portfolio_id}") from e
