# src/flexfee/application/predicates.py
"""
Predicate Evaluator - One Condition Against One Cart

Decides whether a single typed condition holds for a cart snapshot.
Evaluation is fail-closed: data the cart cannot show, values of the wrong
shape and unsupported condition tags all evaluate to False.

Files that USE this module:
- flexfee.application.combinator (evaluate_group maps conditions through here)
- tests.test_predicates (unit tests)

Files that this module USES:
- flexfee.domain.conditions (condition variants)
- flexfee.domain.models (CartSnapshot)
- flexfee.shared.comparison (compare_numeric, compare_string)
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from flexfee.domain.conditions import (
    CONDITION_VARIANTS,
    Condition,
    ConditionType,
    LineItemNumericCondition,
    MembershipCondition,
    NumericCondition,
    ShippingCondition,
    StockStatusCondition,
    UnsupportedCondition,
)
from flexfee.domain.models import CartSnapshot, LineItem
from flexfee.shared.comparison import compare_numeric, compare_string

logger = logging.getLogger(__name__)


def _cart_metric(kind: ConditionType, cart: CartSnapshot) -> float:
    if kind is ConditionType.SUBTOTAL:
        return cart.subtotal
    if kind is ConditionType.SUBTOTAL_EX_TAX:
        return cart.effective_subtotal_ex_tax
    if kind is ConditionType.TAX:
        return cart.tax
    if kind is ConditionType.QUANTITY:
        return cart.total_quantity
    return cart.total_weight


def _cart_set(kind: ConditionType, cart: CartSnapshot) -> tuple[str, ...]:
    if kind is ConditionType.CONTAINS_PRODUCT:
        return cart.product_ids
    if kind is ConditionType.COUPON:
        return cart.coupon_codes
    if kind is ConditionType.CUSTOMER_TAG:
        return cart.customer_tags
    return cart.collection_ids


def _shipping_field(kind: ConditionType, cart: CartSnapshot) -> str:
    if kind is ConditionType.COUNTRY:
        return cart.shipping_country
    if kind is ConditionType.STATE:
        return cart.shipping_state
    if kind is ConditionType.CITY:
        return cart.shipping_city
    return cart.shipping_zipcode


def _line_item_metric(kind: ConditionType, item: LineItem) -> Optional[float]:
    if kind is ConditionType.STOCK:
        return item.stock
    if kind is ConditionType.WIDTH:
        return item.dimensions.width
    if kind is ConditionType.HEIGHT:
        return item.dimensions.height
    return item.dimensions.length


def _evaluate_numeric(condition: NumericCondition, cart: CartSnapshot) -> bool:
    return compare_numeric(
        _cart_metric(condition.type, cart), condition.operator, condition.threshold
    )


def _evaluate_membership(condition: MembershipCondition, cart: CartSnapshot) -> bool:
    # A rule cannot match on data it cannot observe, whichever the operator
    cart_values = _cart_set(condition.type, cart)
    if not condition.values or not cart_values:
        return False

    present = set(cart_values)
    any_present = any(value in present for value in condition.values)
    if condition.operator == "in":
        return any_present
    if condition.operator == "not_in":
        return not any_present
    return False


def _evaluate_shipping(condition: ShippingCondition, cart: CartSnapshot) -> bool:
    if condition.expected is None:
        return False
    return compare_string(
        _shipping_field(condition.type, cart), condition.operator, condition.expected
    )


def _evaluate_line_item_numeric(
    condition: LineItemNumericCondition, cart: CartSnapshot
) -> bool:
    for item in cart.line_items:
        actual = _line_item_metric(condition.type, item)
        if actual is None:
            continue
        if compare_numeric(actual, condition.operator, condition.threshold):
            return True
    return False


def _evaluate_stock_status(condition: StockStatusCondition, cart: CartSnapshot) -> bool:
    if condition.expected is None:
        return False
    return any(
        item.stock_status
        and compare_string(item.stock_status, condition.operator, condition.expected)
        for item in cart.line_items
    )


def _evaluate_unsupported(condition: UnsupportedCondition, cart: CartSnapshot) -> bool:
    logger.warning("Condition type %r is not supported, treating as no match", condition.type)
    return False


_EVALUATORS: dict[type, Callable[..., bool]] = {
    NumericCondition: _evaluate_numeric,
    MembershipCondition: _evaluate_membership,
    ShippingCondition: _evaluate_shipping,
    LineItemNumericCondition: _evaluate_line_item_numeric,
    StockStatusCondition: _evaluate_stock_status,
    UnsupportedCondition: _evaluate_unsupported,
}

# Every variant must have an evaluator
if set(_EVALUATORS) != set(CONDITION_VARIANTS):
    raise RuntimeError("condition dispatch is not exhaustive")


def evaluate_condition(condition: Condition, cart: CartSnapshot) -> bool:
    """
    Evaluate one condition against a cart snapshot.

    Args:
        condition: A condition variant built by build_condition
        cart: Cart snapshot to evaluate against

    Returns:
        True if the condition holds, False otherwise

    Raises:
        TypeError: If condition is not a condition variant
    """
    evaluator = _EVALUATORS.get(type(condition))
    if evaluator is None:
        raise TypeError(f"Not a condition: {condition!r}")
    return evaluator(condition, cart)
