"""Storage backends for serialized portfolio records.

Every backend speaks the same small contract over JSON-ready dicts:
``get`` returns the stored document or None, ``save`` upserts it, and
``delete`` removes it without complaining when it is already gone.
Backends raise ``StorageBackendError`` for anything else; deciding what a
failure means is the tiered store's job.

Backends:
- MemoryBackend: process-lifetime dict with native TTL, the fast primary tier
- DatabaseBackend: SQLAlchemy table with a TTL column, a durable secondary tier
- RecordAPIBackend: external PostgREST-style record API, a durable secondary tier
"""

import copy
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import requests
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from folioshare.api.base_client import BaseAPIClient
from folioshare.config import RecordAPIConfig
from folioshare.server.database.models import PortfolioRecordRow
from folioshare.utils.date_utils import is_expired

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class StorageBackendError(Exception):
    """Exception raised when a backend cannot complete an operation."""

    pass


class StorageBackend(ABC):
    """Keyed document store used as one tier of the portfolio store.

    Attributes:
        name: Short name used in logs and health output
        supports_ttl: Whether ``save`` honors its ``ttl`` hint
    """

    name: str = "backend"
    supports_ttl: bool = False

    @abstractmethod
    def get(self, key: str) -> Optional[Document]:
        """Return the document stored under ``key``, or None."""

    @abstractmethod
    def save(self, key: str, document: Document, ttl: Optional[int] = None) -> None:
        """Insert or replace the document under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; absence is not an error."""


class MemoryBackend(StorageBackend):
    """
    In-process document store.

    Lives as long as the process that owns it. Documents are deep-copied
    on the way in and out so callers never share mutable state with the
    store. TTL hints become monotonic-clock deadlines checked on read.

    Attributes:
        max_entries: Evict the oldest entry beyond this many (0 = unbounded)
    """

    name = "memory"
    supports_ttl = True

    def __init__(self, max_entries: int = 0, clock=time.monotonic):
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[Document, Optional[float]]]" = OrderedDict()
        self._lock = threading.RLock()

    def get(self, key: str) -> Optional[Document]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            document, deadline = entry
            if deadline is not None and self._clock() >= deadline:
                del self._entries[key]
                logger.debug(f"Memory entry {key} reached its TTL")
                return None
            return copy.deepcopy(document)

    def save(self, key: str, document: Document, ttl: Optional[int] = None) -> None:
        deadline = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (copy.deepcopy(document), deadline)
            if self.max_entries and len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted {evicted} from memory backend")

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class DatabaseBackend(StorageBackend):
    """
    SQL table of serialized portfolios.

    One row per portfolio; the TTL hint is stored as an absolute
    ``expires_at`` and rows past it are deleted when read.
    """

    name = "database"
    supports_ttl = True

    def __init__(self, session_factory: sessionmaker):
        """
        Args:
            session_factory: Factory bound to an engine whose schema exists
        """
        self.session_factory = session_factory

    @property
    def engine(self) -> Optional[Engine]:
        """Engine the session factory is bound to."""
        return self.session_factory.kw.get("bind")

    def get(self, key: str) -> Optional[Document]:
        try:
            with self.session_factory() as session:
                row = session.get(PortfolioRecordRow, key)
                if row is None:
                    return None
                if is_expired(row.expires_at, datetime.now(timezone.utc)):
                    session.delete(row)
                    session.commit()
                    logger.info(f"Removed {key} from database after its TTL")
                    return None
                return json.loads(row.payload)
        except SQLAlchemyError as e:
            raise StorageBackendError(f"Database read failed for {key}: {e}") from e
        except ValueError as e:
            raise StorageBackendError(f"Corrupt payload stored for {key}: {e}") from e

    def save(self, key: str, document: Document, ttl: Optional[int] = None) -> None:
        expires_at = None
        if ttl is not None:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=ttl)

        try:
            with self.session_factory() as session:
                row = session.get(PortfolioRecordRow, key)
                if row is None:
                    row = PortfolioRecordRow(id=key)
                    session.add(row)
                row.payload = json.dumps(document)
                row.expires_at = expires_at
                session.commit()
        except SQLAlchemyError as e:
            raise StorageBackendError(f"Database write failed for {key}: {e}") from e

        logger.debug(f"Saved {key} to database")

    def delete(self, key: str) -> None:
        try:
            with self.session_factory() as session:
                session.query(PortfolioRecordRow).filter(PortfolioRecordRow.id == key).delete()
                session.commit()
        except SQLAlchemyError as e:
            raise StorageBackendError(f"Database delete failed for {key}: {e}") from e


class RecordAPIClient(BaseAPIClient):
    """
    HTTP client for an external record API in the PostgREST dialect.

    The table has ``id``, ``data`` (the JSON document) and ``created_at``
    columns. Writes are keyed upserts, so an update touches exactly one row.
    """

    def __init__(self, config: RecordAPIConfig):
        super().__init__(
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
            headers={
                "apikey": config.api_key,
                "Authorization": f"Bearer {config.api_key}",
            },
        )
        self.config = config
        self.BASE_URL = config.rest_url

    @property
    def table_endpoint(self) -> str:
        return f"/{self.config.table}"

    def fetch_document(self, key: str) -> Optional[Document]:
        """Return the ``data`` column of the row keyed ``key``, or None."""
        response = self.get(self.table_endpoint, params={"id": f"eq.{key}", "select": "data"})
        if not response.ok:
            raise StorageBackendError(
                f"Record API read failed for {key}: HTTP {response.status_code}"
            )
        rows = response.json()
        if not rows:
            return None
        return rows[0].get("data")

    def upsert_document(self, key: str, document: Document) -> None:
        """Insert or replace the row keyed ``key``."""
        body = {
            "id": key,
            "data": document,
            "created_at": document.get("createdAt") or datetime.now(timezone.utc).isoformat(),
        }
        response = self.post(
            self.table_endpoint,
            json_data=body,
            params={"on_conflict": "id"},
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )
        if not response.ok:
            raise StorageBackendError(
                f"Record API write failed for {key}: HTTP {response.status_code} {response.text}"
            )

    def delete_document(self, key: str) -> None:
        """Delete the row keyed ``key``; a missing row is fine."""
        response = self.delete(self.table_endpoint, params={"id": f"eq.{key}"})
        if not response.ok and response.status_code != 404:
            raise StorageBackendError(
                f"Record API delete failed for {key}: HTTP {response.status_code}"
            )


class RecordAPIBackend(StorageBackend):
    """Storage tier backed by an external record API."""

    name = "rest"
    supports_ttl = False

    def __init__(self, client: RecordAPIClient):
        self.client = client

    def get(self, key: str) -> Optional[Document]:
        try:
            return self.client.fetch_document(key)
        except requests.exceptions.RequestException as e:
            raise StorageBackendError(f"Record API read failed for {key}: {e}") from e
        except ValueError as e:
            raise StorageBackendError(f"Invalid JSON from record API for {key}: {e}") from e

    def save(self, key: str, document: Document, ttl: Optional[int] = None) -> None:
        try:
            self.client.upsert_document(key, document)
        except requests.exceptions.RequestException as e:
            raise StorageBackendError(f"Record API write failed for {key}: {e}") from e
        logger.debug(f"Saved {key} to record API")

    def delete(self, key: str) -> None:
        try:
            self.client.delete_document(key)
        except requests.exceptions.RequestException as e:
            raise StorageBackendError(f"Record API delete failed for {key}: {e}") from e
