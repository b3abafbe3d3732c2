"""Public portfolio identifiers and edit secrets.

Both tokens come from the ``secrets`` module and are drawn independently,
so knowing one reveals nothing about the other.
"""

import secrets

# token_urlsafe(n) encodes n random bytes: 9 bytes -> 12 chars (72 bits),
# 24 bytes -> 32 chars (192 bits).
PORTFOLIO_ID_BYTES = 9
EDIT_SECRET_BYTES = 24


def generate_portfolio_id() -> str:
    """Short URL-safe public identifier."""
    return secrets.token_urlsafe(PORTFOLIO_ID_BYTES)


def generate_edit_secret() -> str:
    """Long URL-safe bearer token authorizing edits."""
    return secrets.token_urlsafe(EDIT_SECRET_BYTES)


def secrets_match(expected: str, presented: str) -> bool:
    """Constant-time comparison of an edit secret."""
    if not expected or not presented:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), presented.encode("utf-8"))
