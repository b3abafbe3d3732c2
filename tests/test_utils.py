"""Unit tests for expiry, identifier and ticker helpers."""

from datetime import datetime, timedelta, timezone

import pytest

from folioshare.utils.date_utils import (
    Duration,
    compute_expires_at,
    is_expired,
    seconds_until,
)
from folioshare.utils.identifiers import (
    generate_edit_secret,
    generate_portfolio_id,
    secrets_match,
)
from folioshare.utils.validation import is_plausible_ticker, normalize_ticker

NOW = datetime(2026, 3, 2, 15, 30, tzinfo=timezone.utc)


class TestComputeExpiresAt:
    """Duration selector to expiry timestamp."""

    @pytest.mark.parametrize(
        "duration,delta",
        [
            ("1 Day", timedelta(hours=24)),
            ("1 Week", timedelta(days=7)),
            ("1 Month", timedelta(days=30)),
        ],
    )
    def test_known_durations(self, duration, delta):
        assert compute_expires_at(duration, NOW) == NOW + delta

    def test_forever(self):
        assert compute_expires_at(Duration.FOREVER.value, NOW) is None

    @pytest.mark.parametrize("duration", [None, "", "1 Year", "1 day"])
    def test_unknown_means_never(self, duration):
        assert compute_expires_at(duration, NOW) is None


class TestIsExpired:
    """Expiry checks."""

    def test_none_never_expires(self):
        assert is_expired(None, NOW + timedelta(days=36500)) is False

    def test_boundary_is_not_expired(self):
        assert is_expired(NOW, NOW) is False
        assert is_expired(NOW, NOW + timedelta(seconds=1)) is True

    def test_naive_timestamp_is_utc(self):
        naive = datetime(2026, 3, 2, 15, 30)

        assert is_expired(naive, NOW + timedelta(minutes=1)) is True
        assert is_expired(naive, NOW - timedelta(minutes=1)) is False


class TestSecondsUntil:
    """Remaining lifetime for TTL hints."""

    def test_remaining(self):
        assert seconds_until(NOW + timedelta(hours=1), NOW) == 3600

    def test_past_is_zero(self):
        assert seconds_until(NOW - timedelta(hours=1), NOW) == 0

    def test_none(self):
        assert seconds_until(None, NOW) is None


class TestIdentifiers:
    """Id and secret minting."""

    def test_lengths(self):
        assert len(generate_portfolio_id()) == 12
        assert len(generate_edit_secret()) == 32

    def test_url_safe(self):
        token = generate_edit_secret()

        assert all(c.isalnum() or c in "-_" for c in token)

    def test_unique(self):
        ids = {generate_portfolio_id() for _ in range(1000)}

        assert len(ids) == 1000

    def test_secrets_match(self):
        secret = generate_edit_secret()

        assert secrets_match(secret, secret) is True
        assert secrets_match(secret, secret[:-1]) is False
        assert secrets_match(secret, "") is False
        assert secrets_match("", "") is False


class TestTickerHelpers:
    """Ticker normalization and format rule."""

    def test_normalize(self):
        assert normalize_ticker("  brk-b ") == "BRK-B"
        assert normalize_ticker(None) == ""

    @pytest.mark.parametrize("ticker", ["AAPL", "BTC-USD", "SHOP.TO", "VOD.L", "x"])
    def test_plausible(self, ticker):
        assert is_plausible_ticker(ticker) is True

    @pytest.mark.parametrize("ticker", ["", "TOOLONGTICKER", "AB1", "BRK.B", "ETH-EUR"])
    def test_implausible(self, ticker):
        assert is_plausible_ticker(ticker) is False
