# src/flexfee/application/fee_service.py
"""
Fee Service - Fee Resolution Pipeline

This module contains the core business logic for deciding which fees a
cart receives. It filters rules by status, orders them by priority,
evaluates their conditions and computes each matching fee's amount.

Files that USE this module:
- flexfee.app (FeeService, FileRuleSource)
- flexfee.application.stats (round_amount for the amount total)
- flexfee.adapters.formatting.formatter (round_amount for totals)
- tests.test_fee_service (unit tests)

Files that this module USES:
- flexfee.application.combinator (evaluate_rule)
- flexfee.domain.models (FeeRule, CartSnapshot, ApplicableFee)
- flexfee.adapters.persistence.rule_store (load_rules, for FileRuleSource)
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence

from flexfee.application.combinator import evaluate_rule
from flexfee.domain.models import ApplicableFee, CalculationType, CartSnapshot, FeeRule

logger = logging.getLogger(__name__)

_UNIT = Decimal("1")


class RuleSource(Protocol):
    """Protocol for anything that can supply a shop's fee rules."""
    def load_rules(self) -> Sequence[FeeRule]:
        ...


def round_amount(amount: float) -> float:
    """
    Round to cents, halves away from zero.

    Works on the binary value of amount * 100, so 2.675 (stored as
    2.67499...) rounds down to 2.67.
    """
    cents = Decimal(amount * 100).quantize(_UNIT, rounding=ROUND_HALF_UP)
    return float(cents / 100)


def calculate_fee_amount(rule: FeeRule, cart: CartSnapshot) -> float:
    """
    Compute the signed amount of a fee for a cart.

    Args:
        rule: Fee rule whose amount to compute
        cart: Cart snapshot (subtotal and total quantity are used)

    Returns:
        Signed amount rounded to 2 decimal places. An unknown calculation
        type gives 0.0.
    """
    if rule.calculation_type == CalculationType.FIXED.value:
        amount = rule.amount
    elif rule.calculation_type == CalculationType.PERCENTAGE.value:
        amount = cart.subtotal * rule.amount / 100
    elif rule.calculation_type == CalculationType.MULTIPLE.value:
        amount = rule.amount * cart.total_quantity
    else:
        # TODO: decide whether rules with an unknown calculation type should be dropped
        logger.warning(
            "Fee rule %s has unknown calculation type %r, amount set to 0",
            rule.id, rule.calculation_type,
        )
        amount = 0.0

    if rule.sign == "-":
        amount = -amount

    return round_amount(amount)


def get_applicable_fees(
    fee_rules: Iterable[FeeRule], cart: CartSnapshot
) -> List[ApplicableFee]:
    """
    Resolve the fees that apply to a cart.

    Only published rules are considered. Rules are evaluated in ascending
    priority; equal priorities keep their input order.

    Args:
        fee_rules: All fee rules of the shop
        cart: Cart snapshot to evaluate against

    Returns:
        Applicable fees in priority order
    """
    active_rules = sorted(
        (rule for rule in fee_rules if rule.is_published),
        key=lambda rule: rule.priority,
    )

    applicable: List[ApplicableFee] = []
    for rule in active_rules:
        if evaluate_rule(rule, cart):
            amount = calculate_fee_amount(rule, cart)
            logger.debug("Fee rule %s matched, amount=%s", rule.id, amount)
            applicable.append(ApplicableFee(fee_rule=rule, amount=amount))
    return applicable


class FileRuleSource:
    """Rule source backed by the JSON rule store."""
    def __init__(self, path: Optional[Path] = None, strict: Optional[bool] = None):
        """
        Initialize file rule source.

        Args:
            path: Rule file (default: settings.rules_file)
            strict: Strict condition parsing (default: settings.strict_conditions)
        """
        self.path = path
        self.strict = strict

    def load_rules(self) -> Sequence[FeeRule]:
        from flexfee.adapters.persistence.rule_store import load_rules
        return load_rules(self.path, strict=self.strict)


class FeeService:
    """
    High-level service that loads a shop's rules and resolves fees for carts.
    """
    def __init__(self, rule_source: RuleSource):
        """
        Initialize fee service with a rule source.

        Args:
            rule_source: RuleSource instance (typically a FileRuleSource)
        """
        self.rule_source = rule_source
        self._rules: Optional[List[FeeRule]] = None

    def load_rules(self) -> List[FeeRule]:
        """
        Load rules from the rule source and keep them for later carts.

        Raises:
            Whatever the rule source raises (e.g. RuleStoreError)
        """
        self._rules = list(self.rule_source.load_rules())
        return self._rules

    def applicable_fees(self, cart: CartSnapshot) -> List[ApplicableFee]:
        """
        Resolve fees for a cart using the loaded rules.

        Rules are loaded on first use if load_rules() was not called.

        Returns:
            Applicable fees, or an empty list if the rules cannot be loaded
        """
        rules = self._rules
        if rules is None:
            try:
                rules = self.load_rules()
            except Exception as e:
                logger.error("Failed to load fee rules, no fees applied: %s", e)
                return []
        fees = get_applicable_fees(rules, cart)
        logger.info("Resolved %d applicable fee(s) from %d rule(s)", len(fees), len(rules))
        return fees
