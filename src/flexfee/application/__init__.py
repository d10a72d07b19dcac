# src/flexfee/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the fee engine: the predicate evaluator, the
logical combinator and the fee resolution pipeline. No direct I/O
dependencies - rules arrive through a RuleSource.
"""

from flexfee.application.predicates import evaluate_condition
from flexfee.application.combinator import evaluate_group, evaluate_rule
from flexfee.application.fee_service import (
    FeeService,
    FileRuleSource,
    RuleSource,
    calculate_fee_amount,
    get_applicable_fees,
)
from flexfee.application.stats import RuleStats, summarize_rules, top_rules

__all__ = [
    "evaluate_condition",
    "evaluate_group",
    "evaluate_rule",
    "FeeService",
    "FileRuleSource",
    "RuleSource",
    "calculate_fee_amount",
    "get_applicable_fees",
    "RuleStats",
    "summarize_rules",
    "top_rules",
]
