# src/flexfee/adapters/formatting/__init__.py
"""
Formatting Adapters - Output Presentation

This package formats resolved fees as text or JSON payloads.
"""

from flexfee.adapters.formatting.formatter import (
    fees_payload,
    fees_total,
    format_fee_line,
    format_fees,
)

__all__ = [
    "fees_payload",
    "fees_total",
    "format_fee_line",
    "format_fees",
]
