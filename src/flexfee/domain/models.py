# src/flexfee/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Cart snapshots (the read-only view of a cart at evaluation time)
- Condition groups and fee rules authored by merchants
- Applicable fees produced by the fee pipeline

Files that USE this module:
- flexfee.application.* (all engine services read domain models)
- flexfee.adapters.* (adapters build cart snapshots and fee rules)
- tests.* (tests use domain models for test data)

Files that this module USES:
- flexfee.domain.conditions (Condition variants held by condition groups)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass, field  # Decorators for creating immutable data classes
from enum import Enum  # Closed sets of tag values
from typing import Optional  # Type hints for optional values

from flexfee.domain.conditions import Condition


class Combinator(str, Enum):
    """How child results fold into a parent result."""
    AND = "and"
    OR = "or"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Combinator":
        """
        Parse a combinator tag, defaulting to AND when absent.

        Raises:
            ValueError: If the tag is neither "and" nor "or"
        """
        if raw is None or raw == "":
            return cls.AND
        return cls(str(raw).strip().lower())


class CalculationType(str, Enum):
    """Known fee calculation types."""
    FIXED = "fixed"
    PERCENTAGE = "percentage"
    MULTIPLE = "multiple"


class RuleStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(frozen=True)
class Dimensions:
    """Per-variant physical dimensions; any of them may be unknown."""
    width: Optional[float] = None
    height: Optional[float] = None
    length: Optional[float] = None


@dataclass(frozen=True)
class LineItem:
    """
    One cart line.

    Attributes:
        product_id: Product identifier
        variant_id: Variant identifier
        quantity: Units on this line
        price: Unit price
        weight: Unit weight
        collection_ids: Collections the product belongs to
        stock: Inventory level, None when unknown
        stock_status: e.g. "in_stock" / "out_of_stock", None when unknown
        dimensions: Variant dimensions
    """
    product_id: str
    variant_id: str = ""
    quantity: int = 0
    price: float = 0.0
    weight: float = 0.0
    collection_ids: tuple[str, ...] = ()
    stock: Optional[float] = None
    stock_status: Optional[str] = None
    dimensions: Dimensions = field(default_factory=Dimensions)


@dataclass(frozen=True)
class CartSnapshot:
    """
    Immutable view of a cart at evaluation time.

    Defaults for missing data are applied here, once, by whoever builds
    the snapshot; the engine never re-derives them.

    Attributes:
        subtotal: Cart subtotal
        subtotal_ex_tax: Subtotal excluding tax (None falls back to subtotal)
        tax: Total tax
        total_quantity: Sum of line quantities
        total_weight: Total weight
        product_ids: Product identifiers present in the cart
        coupon_codes: Discount codes applied to the cart
        customer_tags: Tags of the cart's customer
        shipping_country: Shipping country code
        shipping_state: Shipping state/province
        shipping_city: Shipping city
        shipping_zipcode: Shipping postal code
        line_items: Cart lines in cart order
    """
    subtotal: float = 0.0
    subtotal_ex_tax: Optional[float] = None
    tax: float = 0.0
    total_quantity: float = 0.0
    total_weight: float = 0.0
    product_ids: tuple[str, ...] = ()
    coupon_codes: tuple[str, ...] = ()
    customer_tags: tuple[str, ...] = ()
    shipping_country: str = ""
    shipping_state: str = ""
    shipping_city: str = ""
    shipping_zipcode: str = ""
    line_items: tuple[LineItem, ...] = ()

    @property
    def effective_subtotal_ex_tax(self) -> float:
        if self.subtotal_ex_tax is None:
            return self.subtotal
        return self.subtotal_ex_tax

    @property
    def collection_ids(self) -> tuple[str, ...]:
        """Union of collection ids across all line items, first-seen order."""
        seen: dict[str, None] = {}
        for item in self.line_items:
            for collection_id in item.collection_ids:
                seen.setdefault(collection_id, None)
        return tuple(seen)


@dataclass(frozen=True)
class ConditionGroup:
    """Conditions sharing one AND/OR combinator."""
    combinator: Combinator = Combinator.AND
    conditions: tuple[Condition, ...] = ()


@dataclass(frozen=True)
class FeeRule:
    """
    A merchant-authored conditional fee.

    Attributes:
        id: Rule identifier
        title: Display title of the fee
        amount: Fee amount (absolute, percentage or per-item depending on type)
        calculation_type: "fixed", "percentage" or "multiple"
        sign: "+" adds a fee, "-" applies a discount
        tax_class: Optional tax class passed through to the fee line
        status: "draft" or "published"
        priority: Lower values are applied first
        group_combinator: How condition groups combine
        condition_groups: Ordered condition groups
    """
    id: str
    title: str
    amount: float
    calculation_type: str = CalculationType.FIXED.value
    sign: str = "+"
    tax_class: Optional[str] = None
    status: str = RuleStatus.DRAFT.value
    priority: int = 0
    group_combinator: Combinator = Combinator.AND
    condition_groups: tuple[ConditionGroup, ...] = ()

    @property
    def is_published(self) -> bool:
        return self.status == RuleStatus.PUBLISHED.value


@dataclass(frozen=True)
class ApplicableFee:
    """A fee rule selected for the current cart and its computed amount."""
    fee_rule: FeeRule
    amount: float

    def to_json(self) -> dict:
        """
        Convert to a JSON-serializable dictionary.

        Returns:
            Dictionary with rule id, title, signed amount and tax class
        """
        return {
            "id": self.fee_rule.id,
            "title": self.fee_rule.title,
            "amount": self.amount,
            "tax_class": self.fee_rule.tax_class,
        }
