# src/flexfee/shared/validators.py
"""
Input Validation Utilities - Parsing and Validation of Authored Data

This module provides the parsing and validation functions used where
merchant-authored data (rule records, condition values, settings) enters
the application.

Files that USE this module:
- flexfee.domain.conditions (parse_numeric for numeric condition thresholds)
- flexfee.adapters.persistence.rule_store (sign and JSON value decoding)
- flexfee.adapters.shopify.cart_adapter (parse_amount for money strings)
- flexfee.config.settings (validate_output_format)

Files that this module USES:
- None (pure utility functions)
"""
import json
import math
import re
from typing import Any, Optional

VALID_SIGNS = ("+", "-")
OUTPUT_FORMATS = ("json", "text")

# Longest leading number, as a browser form parse reads it ("100 USD" -> 100)
_LEADING_NUMBER = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def parse_numeric(value: Any) -> float:
    """
    Parse an authored numeric value.

    Strings are read up to the end of their leading number, so "100 USD"
    gives 100.0 and "1,000" gives 1.0. Bools and input with no leading
    number give NaN. Callers must treat NaN as "never matches".

    Args:
        value: String or number to parse

    Returns:
        Parsed float, or NaN if the value is not a number
    """
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value).lstrip())
    if match is None:
        return math.nan
    return float(match.group())


def parse_amount(value: Any, default: float = 0.0) -> float:
    """
    Parse a money or measurement string, falling back to a default.

    Args:
        value: String or number (e.g. "12.50")
        default: Value used when the input is missing or not a finite number

    Returns:
        Parsed float or the default
    """
    parsed = parse_numeric(value)
    if math.isnan(parsed) or math.isinf(parsed):
        return default
    return parsed


def validate_sign(sign: Optional[str]) -> bool:
    """
    Validate fee sign.

    Args:
        sign: Sign to validate

    Returns:
        True if sign is "+" or "-", False otherwise
    """
    return sign in VALID_SIGNS


def validate_output_format(output_format: str) -> bool:
    return output_format in OUTPUT_FORMATS


def decode_condition_value(value: Any) -> Any:
    """
    Decode a stored condition value.

    List values are stored as JSON-encoded strings; everything else is
    stored as authored. A string that decodes to a list becomes that list,
    any other string is returned unchanged.

    Args:
        value: Stored value (string, list or None)

    Returns:
        A list of strings, the original string, or None
    """
    if isinstance(value, list):
        return [str(v) for v in value]
    if not isinstance(value, str):
        return value

    stripped = value.strip()
    if not stripped.startswith("["):
        return value
    try:
        decoded = json.loads(stripped)
    except json.JSONDecodeError:
        return value
    if isinstance(decoded, list):
        return [str(v) for v in decoded]
    return value
