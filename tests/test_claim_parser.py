"""
Tests for claim parsing, validation and display formatting.
"""

import pytest

from speccheck.analysis.claim_parser import (
    format_claim_value,
    parse_claim,
    parse_multiple_claims,
    validate_claim,
)


class TestParseClaim:
    @pytest.mark.parametrize("text,value,unit,category", [
        ("10000 lumens", 10000, "lm", "lumens"),
        ("5000 lm", 5000, "lm", "lumens"),
        ("10k lumens", 10000, "lm", "lumens"),
        ("10k lm", 10000, "lm", "lumens"),
        ("5000lm", 5000, "lm", "lumens"),
        ("10,000 lumens", 10000, "lm", "lumens"),
        ("100 wh", 100, "Wh", "wh"),
        ("2ah", 2000, "mAh", "mah"),
        ("100W", 100, "W", "watts"),
        ("2.5W", 2.5, "W", "watts"),
        ("12 volts", 12, "V", "volts"),
        ("5A", 5, "A", "amps"),
    ])
    def test_recognized_formats(self, text, value, unit, category):
        claim = parse_claim(text)
        assert claim is not None
        assert claim.value == pytest.approx(value)
        assert claim.unit == unit
        assert claim.category == category

    def test_milliamp_hours_are_not_mega_multiplied(self):
        assert parse_claim("3000mah").value == 3000
        claim = parse_claim("20,000 mAh")
        assert claim.value == 20000
        assert claim.unit == "mAh"

    def test_milliamps_convert_to_amps(self):
        claim = parse_claim("500ma")
        assert claim.category == "amps"
        assert claim.unit == "A"
        assert claim.value == pytest.approx(0.5)

    def test_mega_multiplier(self):
        assert parse_claim("2m lumens").value == 2_000_000

    @pytest.mark.parametrize("text", ["", "   ", "hello world", "1234", "xyz units", "0 lm", "1.2.3 lm", "5 m"])
    def test_unparsable_returns_none(self, text):
        assert parse_claim(text) is None

    def test_overflowing_value_returns_none(self):
        assert parse_claim("9" * 400 + " lm") is None
        assert parse_claim("9" * 308 + "k lm") is None

    def test_keeps_original_text_and_source(self):
        claim = parse_claim("  10,000 lumens ", "listing_text")
        assert claim.original_text == "10,000 lumens"
        assert claim.source == "listing_text"

    def test_default_source(self):
        assert parse_claim("1000lm").source == "user_input"


class TestParseMultipleClaims:
    def test_splits_on_delimiters_in_order(self):
        claims = parse_multiple_claims("1000 lm and 20 Wh / 5V; 65W")
        assert [c.category for c in claims] == ["lumens", "wh", "volts", "watts"]

    def test_drops_unparsable_segments(self):
        claims = parse_multiple_claims("10000 lumens, super bright, 100wh")
        assert [c.category for c in claims] == ["lumens", "wh"]

    def test_and_is_case_insensitive(self):
        assert len(parse_multiple_claims("5A AND 12V")) == 2

    def test_nothing_parses(self):
        assert parse_multiple_claims("nothing useful here") == []
        assert parse_multiple_claims("") == []


class TestValidateClaim:
    def test_reasonable_value(self):
        result = validate_claim(parse_claim("10000 lumens"))
        assert result.valid is True
        assert result.warning is None

    def test_extreme_value_warns(self):
        result = validate_claim(parse_claim("500000 lumens"))
        assert result.valid is False
        assert "100,000" in result.warning

    def test_too_small_capacity(self):
        assert validate_claim(parse_claim("50 mah")).valid is False

    def test_energy_within_bounds(self):
        assert validate_claim(parse_claim("100 Wh")).valid is True


class TestFormatClaimValue:
    @pytest.mark.parametrize("value,unit,expected", [
        (2_000_000, "lm", "2.0M lm"),
        (10_000, "lm", "10.0k lm"),
        (1_500, "mAh", "1.5k mAh"),
        (0.5, "A", "0.50 A"),
        (500, "W", "500 W"),
        (12.6, "Wh", "13 Wh"),
        (2.5, "W", "3 W"),
    ])
    def test_formatting(self, value, unit, expected):
        assert format_claim_value(value, unit) == expected
