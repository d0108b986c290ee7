"""Tests for nanosecond timestamp conversion."""

import pytest

from logframes.errors import InvalidTimestamp
from logframes.time_codec import parse_nanos, passthrough_nanos, to_millis_iso


class TestToMillisIso:
    @pytest.mark.parametrize("nanos,expected", [
        ("1579857562021616000", "2020-01-24T09:19:22.021Z"),
        ("1579857562031616000", "2020-01-24T09:19:22.031Z"),
        ("1581519914265798400", "2020-02-12T15:05:14.265Z"),
        ("0", "1970-01-01T00:00:00.000Z"),
        ("1000000", "1970-01-01T00:00:00.001Z"),
    ])
    def test_known_values(self, nanos, expected):
        assert to_millis_iso(nanos) == expected

    def test_truncates_instead_of_rounding(self):
        assert to_millis_iso("1579857562021999999") == "2020-01-24T09:19:22.021Z"

    def test_sub_millisecond_is_epoch(self):
        assert to_millis_iso("999999") == "1970-01-01T00:00:00.000Z"

    def test_output_is_utc(self):
        assert to_millis_iso("1579857562021616000").endswith("Z")

    @pytest.mark.parametrize("bad", ["", "abc", "-5", "12.5", "1e9", "0x10"])
    def test_rejects_unparseable(self, bad):
        with pytest.raises(InvalidTimestamp):
            to_millis_iso(bad)

    def test_rejects_non_string(self):
        with pytest.raises(InvalidTimestamp):
            to_millis_iso(1579857562021616000)

    def test_rejects_overlong_digit_string(self):
        with pytest.raises(InvalidTimestamp):
            to_millis_iso("9" * 5000)

    def test_rejects_out_of_range(self):
        with pytest.raises(InvalidTimestamp):
            to_millis_iso("9" * 30)

    def test_invalid_timestamp_is_value_error(self):
        with pytest.raises(ValueError):
            to_millis_iso("nope")


class TestParseNanos:
    def test_parses_integer(self):
        assert parse_nanos("1579857562021616000") == 1579857562021616000

    @pytest.mark.parametrize("padded", [" 42", "42 ", " 42 ", "4 2", "42\n"])
    def test_rejects_whitespace(self, padded):
        with pytest.raises(InvalidTimestamp):
            parse_nanos(padded)

    def test_rejects_beyond_int_conversion_limit(self):
        with pytest.raises(InvalidTimestamp):
            parse_nanos("9" * 5000)


class TestPassthroughNanos:
    def test_returns_input_unchanged(self):
        assert passthrough_nanos("1579857562021616000") == "1579857562021616000"
