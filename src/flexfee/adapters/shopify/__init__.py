# src/flexfee/adapters/shopify/__init__.py
"""
Shopify Adapters - Cart Payload Conversion

This package converts Storefront-style cart payloads to cart snapshots
and plans the fee line items that charge applicable fees.
"""

from flexfee.adapters.shopify.cart_adapter import cart_from_mapping, cart_from_shopify
from flexfee.adapters.shopify.fee_lines import FeeLinePlan, existing_fee_lines, plan_fee_lines

__all__ = [
    "cart_from_mapping",
    "cart_from_shopify",
    "FeeLinePlan",
    "existing_fee_lines",
    "plan_fee_lines",
]
