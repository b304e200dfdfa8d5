"""Unit tests for glassbox.utils."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from glassbox.utils import age_days_since, is_valid_mint_address, parse_datetime, short_address


# ===================================================================
# is_valid_mint_address
# ===================================================================

class TestIsValidMintAddress:

    @pytest.mark.parametrize(
        "value",
        [
            "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
            "So11111111111111111111111111111111111111112",
            "11111111111111111111111111111111",
        ],
    )
    def test_valid(self, value):
        assert is_valid_mint_address(value)

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "short",
            "0xdeadbeefdeadbeefdeadbeefdeadbeefdeadbeef",
            "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1vEPjF",  # 48 chars
            "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1l",  # 'l' not in base58
        ],
    )
    def test_invalid(self, value):
        assert not is_valid_mint_address(value)


class TestShortAddress:

    def test_long(self):
        assert short_address("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v") == "EPjF…Dt1v"

    def test_short_and_empty(self):
        assert short_address("abc") == "abc"
        assert short_address(None) is None


# ===================================================================
# parse_datetime
# ===================================================================

class TestParseDatetime:

    def test_none_returns_none(self):
        assert parse_datetime(None) is None

    def test_aware_datetime_passthrough(self):
        dt = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert parse_datetime(dt) is dt

    def test_naive_datetime_gets_utc(self):
        result = parse_datetime(datetime(2024, 1, 15, 12, 0))
        assert result.tzinfo == timezone.utc

    def test_iso_string_z_suffix(self):
        result = parse_datetime("2024-06-01T10:30:00Z")
        assert result == datetime(2024, 6, 1, 10, 30, tzinfo=timezone.utc)

    def test_iso_string_no_tz(self):
        assert parse_datetime("2024-06-01T10:30:00").tzinfo == timezone.utc

    def test_bad_string(self):
        assert parse_datetime("yesterday") is None

    def test_epoch_seconds(self):
        assert parse_datetime(1_700_000_000) == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_bool_and_other_types(self):
        assert parse_datetime(True) is None
        assert parse_datetime([2024]) is None


# ===================================================================
# age_days_since
# ===================================================================

class TestAgeDaysSince:

    NOW = datetime(2024, 6, 10, tzinfo=timezone.utc)

    def test_fractional_days(self):
        created = self.NOW - timedelta(days=2, hours=12)
        assert age_days_since(created, self.NOW) == pytest.approx(2.5)

    def test_future_is_none(self):
        assert age_days_since(self.NOW + timedelta(minutes=1), self.NOW) is None

    def test_unknown(self):
        assert age_days_since(None, self.NOW) is None

    def test_accepts_epoch(self):
        created = (self.NOW - timedelta(hours=6)).timestamp()
        assert age_days_since(created, self.NOW) == pytest.approx(0.25)
