# src/flexfee/application/stats.py
"""
Rule Statistics - Summary Counts for a Shop's Fee Rules

Files that USE this module:
- flexfee.app (--stats output)
- tests.test_fee_service (unit tests)

Files that this module USES:
- flexfee.application.fee_service (round_amount for the amount total)
- flexfee.domain.models (FeeRule, CalculationType, RuleStatus)
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List

from flexfee.application.fee_service import round_amount
from flexfee.domain.models import CalculationType, FeeRule, RuleStatus


@dataclass
class RuleStats:
    """Counts of rules by status and calculation type."""
    total: int = 0
    published: int = 0
    draft: int = 0
    fixed: int = 0
    percentage: int = 0
    multiple: int = 0
    total_fee_amount: float = 0.0  # Sum of published rule amounts

    def to_json(self) -> Dict[str, Any]:
        return asdict(self)


def summarize_rules(rules: Iterable[FeeRule]) -> RuleStats:
    """
    Count rules by status and calculation type.

    Rules with an unknown status or calculation type count towards the
    total only. total_fee_amount adds the configured amounts of published
    rules, whatever their calculation type.
    """
    stats = RuleStats()
    amount = 0.0
    for rule in rules:
        stats.total += 1
        if rule.status == RuleStatus.PUBLISHED.value:
            stats.published += 1
            amount += rule.amount
        elif rule.status == RuleStatus.DRAFT.value:
            stats.draft += 1

        if rule.calculation_type == CalculationType.FIXED.value:
            stats.fixed += 1
        elif rule.calculation_type == CalculationType.PERCENTAGE.value:
            stats.percentage += 1
        elif rule.calculation_type == CalculationType.MULTIPLE.value:
            stats.multiple += 1
    stats.total_fee_amount = round_amount(amount)
    return stats


def top_rules(rules: Iterable[FeeRule], limit: int = 5) -> List[FeeRule]:
    """
    Published rules with the most condition groups, most targeted first.

    Rules with the same number of groups keep their input order.
    """
    published = [rule for rule in rules if rule.is_published]
    published.sort(key=lambda rule: len(rule.condition_groups), reverse=True)
    return published[:limit]
