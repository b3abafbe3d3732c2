"""Expiration policy for shared portfolios."""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class Duration(str, Enum):
    """Lifetimes a creator can pick for a shared portfolio."""

    ONE_DAY = "1 Day"
    ONE_WEEK = "1 Week"
    ONE_MONTH = "1 Month"
    FOREVER = "Forever"


# Calendar durations; a month is a flat 30 days.
DURATION_DELTAS = {
    Duration.ONE_DAY.value: timedelta(hours=24),
    Duration.ONE_WEEK.value: timedelta(days=7),
    Duration.ONE_MONTH.value: timedelta(days=30),
}


def compute_expires_at(duration: Optional[str], now: datetime) -> Optional[datetime]:
    """
    Map a duration selector to an absolute expiry timestamp.

    ``None`` is the "never expires" sentinel. It is returned for
    ``Forever`` and, as an explicit fallback, for any selector that is not
    one of the known durations (missing, misspelled, or a value added by a
    newer front end). Unknown selectors are logged, never rejected.

    Args:
        duration: Duration selector, e.g. "1 Week"
        now: Reference instant the lifetime starts from

    Returns:
        Expiry timestamp, or None if the portfolio never expires
    """
    if duration == Duration.FOREVER.value:
        return None

    delta = DURATION_DELTAS.get(duration or "")
    if delta is None:
        logger.warning(f"Unrecognized duration {duration!r}; treating as never-expiring")
        return None

    return now + delta


def is_expired(expires_at: Optional[datetime], now: datetime) -> bool:
    """
    Check whether an expiry timestamp lies strictly in the past.

    Naive timestamps are interpreted as UTC.
    """
    if expires_at is None:
        return False
    return now > _as_utc(expires_at)


def seconds_until(expires_at: Optional[datetime], now: datetime) -> Optional[int]:
    """
    Remaining lifetime in whole seconds, for backend TTL hints.

    Returns None when there is no expiry and 0 once it has passed.
    """
    if expires_at is None:
        return None
    remaining = (_as_utc(expires_at) - now).total_seconds()
    return max(0, int(remaining))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
