# src/flexfee/application/combinator.py
"""
Logical Combinator - AND/OR Folding of Condition Results

Folds predicate results within a condition group, then group results
under a rule. An empty list folds to True under both AND and OR: a group
or rule with nothing to check imposes no restriction.

Files that USE this module:
- flexfee.application.fee_service (evaluate_rule for each published rule)

Files that this module USES:
- flexfee.application.predicates (evaluate_condition)
- flexfee.domain.models (Combinator, ConditionGroup, FeeRule, CartSnapshot)
"""
from __future__ import annotations

from typing import Iterable

from flexfee.application.predicates import evaluate_condition
from flexfee.domain.models import CartSnapshot, Combinator, ConditionGroup, FeeRule


def fold(combinator: Combinator, results: Iterable[bool]) -> bool:
    """
    Fold boolean results under a combinator.

    The iterable is consumed lazily, so evaluation may stop early.
    An empty iterable gives True for both AND and OR.
    """
    iterator = iter(results)
    try:
        first = next(iterator)
    except StopIteration:
        return True

    if combinator is Combinator.AND:
        return first and all(iterator)
    return first or any(iterator)


def evaluate_group(group: ConditionGroup, cart: CartSnapshot) -> bool:
    """Evaluate every condition of a group and fold under its combinator."""
    return fold(
        group.combinator,
        (evaluate_condition(condition, cart) for condition in group.conditions),
    )


def evaluate_rule(rule: FeeRule, cart: CartSnapshot) -> bool:
    """Evaluate every condition group of a rule and fold under the rule's combinator."""
    return fold(
        rule.group_combinator,
        (evaluate_group(group, cart) for group in rule.condition_groups),
    )
