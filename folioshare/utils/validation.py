"""Ticker normalization and format checks."""

import re
from typing import Optional

# Conservative shape of a listed symbol: 1-8 letters with an optional
# crypto pair or Toronto/London suffix.
TICKER_FORMAT = re.compile(r"^[A-Z]{1,8}(-USD|\.TO|\.L)?$", re.IGNORECASE)


def normalize_ticker(ticker: Optional[str]) -> str:
    """Strip whitespace and upper-case; None becomes an empty string."""
    if ticker is None:
        return ""
    return str(ticker).strip().upper()


def is_plausible_ticker(ticker: str) -> bool:
    """Check a ticker against the offline format rule."""
    return bool(TICKER_FORMAT.match(ticker or ""))
