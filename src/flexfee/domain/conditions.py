# src/flexfee/domain/conditions.py
"""
Condition Variants - Typed Cart Conditions

A condition compares one cart attribute against an authored value. The
authoring UI stores every condition as {type, operator, value} with the
value either a string or a list of strings. This module turns that loose
shape into one of a closed set of typed variants, so the numeric parse
happens exactly once and each evaluator receives the payload it needs.

Files that USE this module:
- flexfee.domain.models (ConditionGroup holds conditions)
- flexfee.application.predicates (dispatches on the variant class)
- flexfee.adapters.persistence.rule_store (builds conditions from records)

Files that this module USES:
- flexfee.shared.validators (parse_numeric for numeric thresholds)
- flexfee.domain.errors (UnknownConditionTypeError for strict parsing)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

from flexfee.domain.errors import UnknownConditionTypeError
from flexfee.shared.validators import parse_numeric

# Authored value: a single string or a sequence of strings
ConditionValue = Union[str, Sequence[str], None]


class ConditionType(str, Enum):
    SUBTOTAL = "subtotal"
    SUBTOTAL_EX_TAX = "subtotal_ex_tax"
    TAX = "tax"
    QUANTITY = "quantity"
    WEIGHT = "weight"
    CONTAINS_PRODUCT = "contains_product"
    COUPON = "coupon"
    CUSTOMER_TAG = "customer_tag"
    COLLECTION = "collection"
    COUNTRY = "country"
    STATE = "state"
    CITY = "city"
    ZIPCODE = "zipcode"
    STOCK = "stock"
    STOCK_STATUS = "stock_status"
    WIDTH = "width"
    HEIGHT = "height"
    LENGTH = "length"


@dataclass(frozen=True)
class NumericCondition:
    """Compares a cart-level aggregate (subtotal, tax, quantity, ...)."""
    type: ConditionType
    operator: str
    threshold: float  # NaN when the authored value is not a number
    value: ConditionValue = None


@dataclass(frozen=True)
class MembershipCondition:
    """Checks authored identifiers against a cart identifier set."""
    type: ConditionType
    operator: str
    values: Optional[tuple[str, ...]]  # None when the authored value is not a sequence
    value: ConditionValue = None


@dataclass(frozen=True)
class ShippingCondition:
    """Compares one shipping address field as a string."""
    type: ConditionType
    operator: str
    expected: Optional[str]
    value: ConditionValue = None


@dataclass(frozen=True)
class LineItemNumericCondition:
    """Matches when any line item's stock or dimension satisfies the comparison."""
    type: ConditionType
    operator: str
    threshold: float
    value: ConditionValue = None


@dataclass(frozen=True)
class StockStatusCondition:
    """Matches when any line item's stock status satisfies the comparison."""
    operator: str
    expected: Optional[str]
    value: ConditionValue = None

    @property
    def type(self) -> ConditionType:
        return ConditionType.STOCK_STATUS


@dataclass(frozen=True)
class UnsupportedCondition:
    """A condition tag this engine does not evaluate. Never matches."""
    type: str
    operator: str
    value: ConditionValue = None


Condition = Union[
    NumericCondition,
    MembershipCondition,
    ShippingCondition,
    LineItemNumericCondition,
    StockStatusCondition,
    UnsupportedCondition,
]

CONDITION_VARIANTS = (
    NumericCondition,
    MembershipCondition,
    ShippingCondition,
    LineItemNumericCondition,
    StockStatusCondition,
    UnsupportedCondition,
)

NUMERIC_TYPES = frozenset({
    ConditionType.SUBTOTAL,
    ConditionType.SUBTOTAL_EX_TAX,
    ConditionType.TAX,
    ConditionType.QUANTITY,
    ConditionType.WEIGHT,
})
MEMBERSHIP_TYPES = frozenset({
    ConditionType.CONTAINS_PRODUCT,
    ConditionType.COUPON,
    ConditionType.CUSTOMER_TAG,
    ConditionType.COLLECTION,
})
SHIPPING_TYPES = frozenset({
    ConditionType.COUNTRY,
    ConditionType.STATE,
    ConditionType.CITY,
    ConditionType.ZIPCODE,
})
LINE_ITEM_NUMERIC_TYPES = frozenset({
    ConditionType.STOCK,
    ConditionType.WIDTH,
    ConditionType.HEIGHT,
    ConditionType.LENGTH,
})


def _freeze_value(value: ConditionValue) -> ConditionValue:
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return value


def _as_sequence(value: ConditionValue) -> Optional[tuple[str, ...]]:
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value)
    return None


def _as_string(value: ConditionValue) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_threshold(value: ConditionValue) -> float:
    # Only a scalar can be a threshold; sequences parse to NaN
    if isinstance(value, (list, tuple)):
        return parse_numeric(None)
    return parse_numeric(value)


def build_condition(
    condition_type: str,
    operator: str,
    value: ConditionValue,
    strict: bool = False,
) -> Condition:
    """
    Build a typed condition from its authored {type, operator, value} form.

    Args:
        condition_type: Condition type tag (e.g. "subtotal", "coupon")
        operator: Comparison operator as authored (">=", "in", "contains", ...)
        value: Authored value, a string or a sequence of strings
        strict: Raise on unknown type tags instead of returning UnsupportedCondition

    Returns:
        The condition variant matching the type tag

    Raises:
        UnknownConditionTypeError: If strict and the type tag is unknown
    """
    operator = "" if operator is None else str(operator)
    frozen = _freeze_value(value)
    try:
        kind = ConditionType(condition_type)
    except ValueError:
        if strict:
            raise UnknownConditionTypeError(f"Unknown condition type: {condition_type!r}")
        return UnsupportedCondition(type=str(condition_type), operator=operator, value=frozen)

    if kind in NUMERIC_TYPES:
        return NumericCondition(kind, operator, _as_threshold(value), frozen)
    if kind in MEMBERSHIP_TYPES:
        return MembershipCondition(kind, operator, _as_sequence(value), frozen)
    if kind in SHIPPING_TYPES:
        return ShippingCondition(kind, operator, _as_string(value), frozen)
    if kind in LINE_ITEM_NUMERIC_TYPES:
        return LineItemNumericCondition(kind, operator, _as_threshold(value), frozen)
    return StockStatusCondition(operator, _as_string(value), frozen)
