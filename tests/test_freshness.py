"""
Tests for expires parsing and the freshness rule.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from ipxcache.cache.freshness import expires_at, get_expires, is_fresh, parse_expires
from ipxcache.utils.dates import EPOCH, http_date, parse_timestamp

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class TestParseTimestamp:
    """Test accepted expires formats."""

    def test_http_date(self) -> None:
        assert parse_timestamp("Mon, 19 Oct 2026 12:00:00 GMT") == NOW

    def test_iso_string_with_z(self) -> None:
        assert parse_timestamp("2026-10-19T12:00:00Z") == NOW

    def test_naive_iso_string_is_utc(self) -> None:
        assert parse_timestamp("2026-10-19T12:00:00") == NOW

    def test_offset_iso_string_converted(self) -> None:
        assert parse_timestamp("2026-10-19T14:00:00+02:00") == NOW

    def test_epoch_milliseconds(self) -> None:
        assert parse_timestamp(int(NOW.timestamp() * 1000)) == NOW

    def test_datetime(self) -> None:
        assert parse_timestamp(NOW.replace(tzinfo=None)) == NOW

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", True, [1, 2], {}])
    def test_unparseable(self, value: object) -> None:
        assert parse_timestamp(value) is None

    def test_http_date_formatting(self) -> None:
        assert http_date(NOW) == "Mon, 19 Oct 2026 12:00:00 GMT"
        assert parse_timestamp(http_date(NOW)) == NOW


class TestExpiresLookup:
    """Test header lookup and fallbacks."""

    def test_lowercase_header(self) -> None:
        assert get_expires({"expires": "x"}) == "x"

    def test_header_name_case_ignored(self) -> None:
        assert get_expires({"Content-Type": "image/png", "Expires": "y"}) == "y"

    def test_missing(self) -> None:
        assert get_expires({}) is None
        assert get_expires(None) is None

    def test_parse_expires_falls_back_to_epoch(self) -> None:
        assert parse_expires("garbage") == EPOCH
        assert parse_expires(None) == EPOCH


class TestFreshnessRule:
    """Test that TTL is layered on top of the stored expires value."""

    def test_fresh_within_ttl(self) -> None:
        meta = {"expires": http_date(NOW)}
        assert is_fresh(meta, 10, now=NOW)
        assert is_fresh(meta, 10, now=NOW + timedelta(seconds=10))

    def test_expired_after_ttl(self) -> None:
        meta = {"expires": http_date(NOW)}
        assert not is_fresh(meta, 10, now=NOW + timedelta(seconds=11))

    def test_zero_ttl_uses_expires_as_deadline(self) -> None:
        meta = {"expires": http_date(NOW)}
        assert is_fresh(meta, 0, now=NOW)
        assert not is_fresh(meta, 0, now=NOW + timedelta(seconds=1))

    def test_past_expires_still_fresh_within_ttl(self) -> None:
        meta = {"expires": http_date(NOW - timedelta(hours=1))}
        assert is_fresh(meta, 86400, now=NOW)

    def test_missing_expires_is_expired(self) -> None:
        assert not is_fresh({}, 86400, now=NOW)
        assert not is_fresh(None, 86400, now=NOW)

    def test_expires_at(self) -> None:
        meta = {"expires": http_date(NOW)}
        assert expires_at(meta, 60) == NOW + timedelta(seconds=60)
        assert expires_at({}, 60) == EPOCH + timedelta(seconds=60)
