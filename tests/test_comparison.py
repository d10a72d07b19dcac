# tests/test_comparison.py
"""
Comparison Tests - Unit Tests for Numeric/String Comparisons and Parsing

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- flexfee.shared.comparison (compare_numeric, compare_string)
- flexfee.shared.validators (parse_numeric, parse_amount, decode_condition_value)
"""
import math

import pytest  # Testing framework for writing and running tests

from flexfee.shared.comparison import compare_numeric, compare_string
from flexfee.shared.validators import (
    decode_condition_value,
    parse_amount,
    parse_numeric,
    validate_sign,
)


class TestCompareNumeric:
    @pytest.mark.parametrize("operator,expected", [
        (">=", True), ("<=", False), (">", True), ("<", False),
    ])
    def test_ordering_operators(self, operator, expected):
        assert compare_numeric(150, operator, 100) is expected

    def test_ordering_is_exact_at_boundary(self):
        assert compare_numeric(100, ">=", 100) is True
        assert compare_numeric(100, ">", 100) is False
        assert compare_numeric(99.999, ">=", 100) is False

    def test_equality_uses_epsilon(self):
        assert compare_numeric(10.001, "==", 10.002) is True
        assert compare_numeric(10.00, "==", 10.02) is False

    def test_inequality_uses_epsilon(self):
        assert compare_numeric(10.001, "!=", 10.002) is False
        assert compare_numeric(10.00, "!=", 10.02) is True

    @pytest.mark.parametrize("operator", [">=", "<=", ">", "<", "==", "!="])
    def test_nan_never_matches(self, operator):
        assert compare_numeric(5, operator, math.nan) is False
        assert compare_numeric(math.nan, operator, 5) is False

    def test_unknown_operator(self):
        assert compare_numeric(5, "=>", 5) is False


class TestCompareString:
    def test_equality_is_case_insensitive(self):
        assert compare_string("US", "==", "us") is True
        assert compare_string("US", "!=", "us") is False
        assert compare_string("US", "!=", "CA") is True

    def test_contains(self):
        assert compare_string("San Francisco", "contains", "FRAN") is True
        assert compare_string("San Francisco", "not_contains", "fran") is False
        assert compare_string("Oakland", "not_contains", "fran") is True

    def test_empty_actual(self):
        assert compare_string("", "==", "") is True
        assert compare_string("", "contains", "x") is False

    def test_unknown_operator(self):
        assert compare_string("a", "in", "a") is False


class TestParseNumeric:
    def test_strings_and_numbers(self):
        assert parse_numeric("100") == 100.0
        assert parse_numeric(" 12.5 ") == 12.5
        assert parse_numeric(3) == 3.0

    @pytest.mark.parametrize("raw, expected", [
        ("100 USD", 100.0),
        ("1,000", 1.0),
        ("1_000", 1.0),
        ("  -2.5kg", -2.5),
        (".5", 0.5),
        ("3e2", 300.0),
        ("7e", 7.0),
    ])
    def test_leading_number_prefix(self, raw, expected):
        assert parse_numeric(raw) == expected

    def test_infinity(self):
        assert parse_numeric("Infinity") == math.inf
        assert parse_numeric("-Infinity") == -math.inf

    @pytest.mark.parametrize("raw", ["abc", "", None, True, "inf", "USD 100", "."])
    def test_non_numeric_gives_nan(self, raw):
        assert math.isnan(parse_numeric(raw))

    def test_parse_amount_defaults(self):
        assert parse_amount("19.99") == 19.99
        assert parse_amount(None) == 0.0
        assert parse_amount("n/a", default=1.0) == 1.0
        assert parse_amount("inf") == 0.0


class TestValidators:
    def test_validate_sign(self):
        assert validate_sign("+")
        assert validate_sign("-")
        assert not validate_sign("*")
        assert not validate_sign(None)

    def test_decode_condition_value(self):
        assert decode_condition_value('["a", "b"]') == ["a", "b"]
        assert decode_condition_value("100") == "100"
        assert decode_condition_value("[not json") == "[not json"
        assert decode_condition_value(["x", 1]) == ["x", "1"]
        assert decode_condition_value(None) is None
