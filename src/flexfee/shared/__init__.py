# src/flexfee/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation and parsing of authored data
- Numeric and string comparisons
- Logging configuration
"""

from flexfee.shared.validators import (
    decode_condition_value,
    parse_amount,
    parse_numeric,
    validate_output_format,
    validate_sign,
)
from flexfee.shared.comparison import (
    EQUALITY_EPSILON,
    compare_numeric,
    compare_string,
)

__all__ = [
    "decode_condition_value",
    "parse_amount",
    "parse_numeric",
    "validate_output_format",
    "validate_sign",
    "EQUALITY_EPSILON",
    "compare_numeric",
    "compare_string",
]
