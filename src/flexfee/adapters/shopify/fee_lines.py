# src/flexfee/adapters/shopify/fee_lines.py
"""
Fee Lines - Reconcile Applicable Fees with Fee Line Items in a Cart

Fees are charged as line items whose variant carries a "fee_rule_id"
metafield. This module works out which fee lines to add, update or remove
so the cart matches the applicable fees. It only plans; the calls to the
platform's cart API are made by the host.

Files that USE this module:
- flexfee.app (--shopify output includes the line plan)
- tests.test_cart_adapter (unit tests)

Files that this module USES:
- flexfee.adapters.shopify.cart_adapter (connection and metafield helpers)
- flexfee.domain.models (ApplicableFee)
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from flexfee.adapters.shopify.cart_adapter import connection_nodes, metafield_values
from flexfee.domain.models import ApplicableFee

FEE_RULE_METAFIELD = "fee_rule_id"


@dataclass
class FeeLinePlan:
    """Cart line changes needed to charge exactly the applicable fees."""
    to_add: List[Dict[str, Any]] = field(default_factory=list)
    to_update: List[Dict[str, Any]] = field(default_factory=list)
    to_remove: List[str] = field(default_factory=list)

    def to_json(self) -> dict:
        return asdict(self)


def existing_fee_lines(cart: Mapping[str, Any]) -> Dict[str, str]:
    """
    Find fee line items already in a cart.

    Returns:
        Mapping of fee rule id -> cart line id
    """
    lines: Dict[str, str] = {}
    for node in connection_nodes(cart.get("lineItems")):
        variant = node.get("variant") or {}
        fee_rule_id = metafield_values(variant.get("metafields")).get(FEE_RULE_METAFIELD)
        if fee_rule_id:
            lines.setdefault(str(fee_rule_id), str(node.get("id") or ""))
    return lines


def plan_fee_lines(fees: Sequence[ApplicableFee], cart: Mapping[str, Any]) -> FeeLinePlan:
    """
    Plan fee line changes for a cart.

    Args:
        fees: Applicable fees in priority order
        cart: Storefront-style cart payload

    Returns:
        FeeLinePlan; line prices are the absolute fee amounts
    """
    existing = existing_fee_lines(cart)
    plan = FeeLinePlan()

    for fee in fees:
        rule = fee.fee_rule
        line = {
            "fee_rule_id": rule.id,
            "title": rule.title,
            "price": abs(fee.amount),
            "quantity": 1,
        }
        if rule.id in existing:
            plan.to_update.append({"id": existing[rule.id], **line})
        else:
            plan.to_add.append(line)

    applicable_ids = {fee.fee_rule.id for fee in fees}
    plan.to_remove = [
        line_id for rule_id, line_id in existing.items() if rule_id not in applicable_ids
    ]
    return plan
