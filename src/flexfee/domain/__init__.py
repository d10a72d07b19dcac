# src/flexfee/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from flexfee.domain.conditions import (
    Condition,
    ConditionType,
    LineItemNumericCondition,
    MembershipCondition,
    NumericCondition,
    ShippingCondition,
    StockStatusCondition,
    UnsupportedCondition,
    build_condition,
)
from flexfee.domain.models import (
    ApplicableFee,
    CalculationType,
    CartSnapshot,
    Combinator,
    ConditionGroup,
    Dimensions,
    FeeRule,
    LineItem,
    RuleStatus,
)
from flexfee.domain.errors import (
    DomainError,
    InvalidCartError,
    InvalidRuleError,
    RuleStoreError,
    UnknownConditionTypeError,
)

__all__ = [
    "ApplicableFee",
    "CalculationType",
    "CartSnapshot",
    "Combinator",
    "Condition",
    "ConditionGroup",
    "ConditionType",
    "Dimensions",
    "FeeRule",
    "LineItem",
    "RuleStatus",
    "NumericCondition",
    "MembershipCondition",
    "ShippingCondition",
    "LineItemNumericCondition",
    "StockStatusCondition",
    "UnsupportedCondition",
    "build_condition",
    "DomainError",
    "InvalidCartError",
    "InvalidRuleError",
    "RuleStoreError",
    "UnknownConditionTypeError",
]
