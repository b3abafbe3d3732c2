"""Portfolio storage tiers and the store that combines them."""

import logging

from folioshare.config import RecordAPIConfig
from folioshare.server.config import Settings
from folioshare.server.database.session import create_session_factory, init_engine
from folioshare.server.storage.backends import (
    DatabaseBackend,
    MemoryBackend,
    RecordAPIBackend,
    RecordAPIClient,
    StorageBackend,
    StorageBackendError,
)
from folioshare.server.storage.tiered import TieredPortfolioStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> TieredPortfolioStore:
    """Assemble the store described by ``settings``.

    The primary tier is always an in-process MemoryBackend; the secondary
    tier is chosen by ``settings.secondary_backend``.

    Raises:
        ValueError: If the chosen secondary backend is missing configuration
    """
    primary = MemoryBackend(max_entries=settings.memory_max_entries)
    secondary: StorageBackend | None = None

    if settings.secondary_backend == "database":
        engine = init_engine(settings.database_url, echo=settings.debug)
        secondary = DatabaseBackend(create_session_factory(engine))
    elif settings.secondary_backend == "rest":
        config = RecordAPIConfig.from_values(
            settings.rest_url, settings.rest_api_key, table=settings.rest_table
        )
        secondary = RecordAPIBackend(RecordAPIClient(config))

    store = TieredPortfolioStore(primary=primary, secondary=secondary)
    logger.info(f"Portfolio store tiers: {', '.join(store.backend_names)}")
    return store


__all__ = [
    "DatabaseBackend",
    "MemoryBackend",
    "RecordAPIBackend",
    "RecordAPIClient",
    "StorageBackend",
    "StorageBackendError",
    "TieredPortfolioStore",
    "build_store",
]
