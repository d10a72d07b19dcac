# src/flexfee/adapters/formatting/formatter.py
"""
Fee Formatter - Text and JSON Presentation of Applicable Fees

This module handles all output formatting for resolved fees: a plain
text summary for people and a JSON response body for callers such as a
storefront extension.

Files that USE this module:
- flexfee.app (prints fees in the configured output format)
- tests.test_formatter (unit tests)

Files that this module USES:
- flexfee.domain.models (ApplicableFee)
- flexfee.application.fee_service (round_amount for totals)
"""
from __future__ import annotations

from typing import Optional, Sequence

from flexfee.application.fee_service import round_amount
from flexfee.domain.models import ApplicableFee


def _fmt_amount(amount: float, currency: str = "") -> str:
    """
    Format a signed amount, e.g. "+5.00" or "-20.00 USD".
    """
    text = f"{amount:+.2f}"
    return f"{text} {currency}" if currency else text


def fees_total(fees: Sequence[ApplicableFee]) -> float:
    return round_amount(sum(fee.amount for fee in fees))


def format_fee_line(fee: ApplicableFee, currency: str = "") -> str:
    """
    Format one fee as a single line.

    Args:
        fee: Applicable fee
        currency: Optional currency code appended to the amount

    Returns:
        Line like "— Handling fee: +5.00"
    """
    line = f"— {fee.fee_rule.title}: {_fmt_amount(fee.amount, currency)}"
    if fee.fee_rule.tax_class:
        line += f" [{fee.fee_rule.tax_class}]"
    return line


def format_fees(
    fees: Sequence[ApplicableFee],
    title: str = "Applicable fees",
    currency: str = "",
) -> str:
    """
    Format fees as a plain text summary with a total.

    Returns:
        Multi-line summary, or a "none" line when no fees apply
    """
    if not fees:
        return f"{title}\n— none"

    lines = [title]
    lines.extend(format_fee_line(fee, currency) for fee in fees)
    lines.append(f"Total: {_fmt_amount(fees_total(fees), currency)}")
    return "\n".join(lines)


def fees_payload(fees: Sequence[ApplicableFee], line_plan: Optional[dict] = None) -> dict:
    """
    Build the JSON response body for resolved fees.

    Args:
        fees: Applicable fees in priority order
        line_plan: Optional fee line plan to include

    Returns:
        Dictionary with success flag, fees and total
    """
    payload = {
        "success": True,
        "fees": [fee.to_json() for fee in fees],
        "total": fees_total(fees),
    }
    if line_plan is not None:
        payload["lines"] = line_plan
    return payload
