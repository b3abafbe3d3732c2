"""Shared utility functions."""

from .date_utils import Duration, compute_expires_at, is_expired, seconds_until
from .identifiers import generate_edit_secret, generate_portfolio_id, secrets_match
from .validation import TICKER_FORMAT, is_plausible_ticker, normalize_ticker

__all__ = [
    "Duration",
    "compute_expires_at",
    "is_expired",
    "seconds_until",
    "generate_edit_secret",
    "generate_portfolio_id",
    "secrets_match",
    "TICKER_FORMAT",
    "is_plausible_ticker",
    "normalize_ticker",
]
