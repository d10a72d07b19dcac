# tests/test_fee_service.py
"""
Fee Service Tests - Unit Tests for the Fee Resolution Pipeline

This module tests fee amount calculation, status gating, priority
ordering, the end-to-end checkout scenarios, FeeService wiring and rule
statistics.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- flexfee.application.fee_service (calculate_fee_amount, get_applicable_fees, FeeService)
- flexfee.application.stats (summarize_rules, top_rules)
- flexfee.adapters.persistence.rule_store (save_rules for FileRuleSource)
- unittest.mock (Mock for rule sources)
"""
import logging

import pytest  # Testing framework for writing and running tests

from unittest.mock import Mock  # Mock objects for rule sources

from flexfee.adapters.persistence.rule_store import save_rules
from flexfee.application.fee_service import (
    FeeService,
    FileRuleSource,
    calculate_fee_amount,
    get_applicable_fees,
    round_amount,
)
from flexfee.application.stats import summarize_rules, top_rules
from flexfee.domain.conditions import build_condition
from flexfee.domain.errors import RuleStoreError
from flexfee.domain.models import (
    ApplicableFee,
    CartSnapshot,
    Combinator,
    ConditionGroup,
    FeeRule,
)

SUBTOTAL_AT_LEAST_100 = ConditionGroup(
    combinator=Combinator.AND,
    conditions=(build_condition("subtotal", ">=", "100"),),
)


def _rule(rule_id="r1", **overrides):
    fields = dict(
        id=rule_id,
        title=f"Fee {rule_id}",
        amount=5.0,
        calculation_type="fixed",
        sign="+",
        status="published",
        priority=0,
        group_combinator=Combinator.OR,
        condition_groups=(),
    )
    fields.update(overrides)
    return FeeRule(**fields)


class TestCalculateFeeAmount:
    def test_fixed(self):
        assert calculate_fee_amount(_rule(amount=5), CartSnapshot()) == 5.0

    def test_percentage(self):
        rule = _rule(calculation_type="percentage", amount=10)
        assert calculate_fee_amount(rule, CartSnapshot(subtotal=200)) == 20.0

    def test_multiple(self):
        rule = _rule(calculation_type="multiple", amount=2.5)
        assert calculate_fee_amount(rule, CartSnapshot(total_quantity=3)) == 7.5

    def test_negative_sign_rounds_after_negation(self):
        rule = _rule(amount=19.999, sign="-")
        assert calculate_fee_amount(rule, CartSnapshot()) == -20.0

    def test_rounding_is_symmetric_in_sign(self):
        plus = calculate_fee_amount(_rule(amount=19.999), CartSnapshot())
        minus = calculate_fee_amount(_rule(amount=19.999, sign="-"), CartSnapshot())
        assert plus == 20.0
        assert minus == -plus

    def test_percentage_rounds_to_cents(self):
        rule = _rule(calculation_type="percentage", amount=3)
        assert calculate_fee_amount(rule, CartSnapshot(subtotal=33.33)) == 1.0

    def test_zero_amount_is_valid(self):
        rule = _rule(calculation_type="percentage", amount=10)
        assert calculate_fee_amount(rule, CartSnapshot()) == 0.0

    def test_unknown_calculation_type_is_zero(self, caplog):
        rule = _rule(calculation_type="tiered", amount=10)
        with caplog.at_level(logging.WARNING):
            assert calculate_fee_amount(rule, CartSnapshot(subtotal=100)) == 0.0
        assert "unknown calculation type" in caplog.text


class TestRoundAmount:
    def test_half_away_from_zero(self):
        assert round_amount(0.125) == 0.13
        assert round_amount(-0.125) == -0.13

    def test_rounds_binary_value_of_cents(self):
        # 2.675 * 100 and 1.005 * 100 fall just below .5
        assert round_amount(2.675) == 2.67
        assert round_amount(-2.675) == -2.67
        assert round_amount(1.005) == 1.0

    def test_fixed_fee_uses_cent_rounding(self):
        assert calculate_fee_amount(_rule(amount=1.005), CartSnapshot()) == 1.0

    def test_already_rounded(self):
        assert round_amount(7.5) == 7.5


class TestGetApplicableFees:
    def test_draft_rules_never_apply(self):
        rules = [_rule("draft", status="draft"), _rule("pub")]
        fees = get_applicable_fees(rules, CartSnapshot())
        assert [fee.fee_rule.id for fee in fees] == ["pub"]

    def test_unknown_status_never_applies(self):
        assert get_applicable_fees([_rule(status="archived")], CartSnapshot()) == []

    def test_priority_order_is_stable(self):
        rules = [
            _rule("a", priority=2),
            _rule("b", priority=1),
            _rule("c", priority=2),
            _rule("d", priority=1),
            _rule("e", priority=-1),
        ]
        fees = get_applicable_fees(rules, CartSnapshot())
        assert [fee.fee_rule.id for fee in fees] == ["e", "b", "d", "a", "c"]

    def test_non_matching_rules_are_dropped(self):
        rules = [_rule("match"), _rule("miss", condition_groups=(SUBTOTAL_AT_LEAST_100,))]
        fees = get_applicable_fees(rules, CartSnapshot(subtotal=10))
        assert [fee.fee_rule.id for fee in fees] == ["match"]

    def test_unknown_calculation_type_still_listed(self):
        fees = get_applicable_fees([_rule(calculation_type="tiered")], CartSnapshot())
        assert len(fees) == 1
        assert fees[0].amount == 0.0

    def test_accepts_any_iterable(self):
        fees = get_applicable_fees(iter([_rule()]), CartSnapshot())
        assert len(fees) == 1

    def test_no_rules(self):
        assert get_applicable_fees([], CartSnapshot(subtotal=100)) == []


class TestCheckoutScenarios:
    def test_subtotal_rule_matches(self):
        rule = _rule(condition_groups=(SUBTOTAL_AT_LEAST_100,))
        fees = get_applicable_fees([rule], CartSnapshot(subtotal=150))
        assert fees == [ApplicableFee(fee_rule=rule, amount=5.0)]

    def test_subtotal_rule_does_not_match(self):
        rule = _rule(condition_groups=(SUBTOTAL_AT_LEAST_100,))
        assert get_applicable_fees([rule], CartSnapshot(subtotal=50)) == []

    def test_two_rules_sorted_by_priority(self):
        second = _rule("second", priority=2, condition_groups=(SUBTOTAL_AT_LEAST_100,))
        first = _rule("first", priority=1, condition_groups=(SUBTOTAL_AT_LEAST_100,))
        fees = get_applicable_fees([second, first], CartSnapshot(subtotal=150))
        assert [fee.fee_rule.id for fee in fees] == ["first", "second"]

    def test_percentage_rule(self):
        rule = _rule(calculation_type="percentage", amount=10)
        fees = get_applicable_fees([rule], CartSnapshot(subtotal=200))
        assert fees[0].amount == 20.0

    def test_multiple_rule(self):
        rule = _rule(calculation_type="multiple", amount=2.5)
        fees = get_applicable_fees([rule], CartSnapshot(total_quantity=3))
        assert fees[0].amount == 7.5

    def test_discount_rule(self):
        rule = _rule(amount=3, sign="-")
        fees = get_applicable_fees([rule], CartSnapshot())
        assert fees[0].amount == -3.0
        assert fees[0].to_json() == {"id": "r1", "title": "Fee r1", "amount": -3.0, "tax_class": None}


class TestFeeService:
    def test_applicable_fees(self):
        source = Mock()
        source.load_rules.return_value = [_rule()]
        service = FeeService(rule_source=source)

        fees = service.applicable_fees(CartSnapshot())

        assert [fee.fee_rule.id for fee in fees] == ["r1"]
        source.load_rules.assert_called_once()

    def test_failing_source_gives_no_fees(self):
        source = Mock()
        source.load_rules.side_effect = RuntimeError("store down")
        service = FeeService(rule_source=source)
        assert service.applicable_fees(CartSnapshot()) == []

    def test_loaded_rules_are_reused(self):
        source = Mock()
        source.load_rules.return_value = [_rule()]
        service = FeeService(rule_source=source)

        assert [rule.id for rule in service.load_rules()] == ["r1"]
        service.applicable_fees(CartSnapshot())
        service.applicable_fees(CartSnapshot(subtotal=10))

        source.load_rules.assert_called_once()

    def test_explicit_load_propagates_errors(self):
        source = Mock()
        source.load_rules.side_effect = RuleStoreError("corrupt")
        with pytest.raises(RuleStoreError):
            FeeService(rule_source=source).load_rules()

    def test_file_rule_source(self, tmp_path):
        path = tmp_path / "rules.json"
        save_rules([_rule("saved", condition_groups=(SUBTOTAL_AT_LEAST_100,))], path)
        service = FeeService(FileRuleSource(path, strict=False))

        assert [f.fee_rule.id for f in service.applicable_fees(CartSnapshot(subtotal=100))] == ["saved"]
        assert service.applicable_fees(CartSnapshot(subtotal=99)) == []


class TestSummarizeRules:
    def test_counts(self):
        rules = [
            _rule("a"),
            _rule("b", status="draft", calculation_type="percentage"),
            _rule("c", calculation_type="multiple"),
            _rule("d", status="archived", calculation_type="tiered"),
        ]
        stats = summarize_rules(rules)
        assert stats.to_json() == {
            "total": 4,
            "published": 2,
            "draft": 1,
            "fixed": 1,
            "percentage": 1,
            "multiple": 1,
            "total_fee_amount": 10.0,
        }

    def test_total_fee_amount_counts_published_only(self):
        rules = [_rule("a", amount=2.5), _rule("b", amount=1.25), _rule("c", status="draft", amount=99)]
        assert summarize_rules(rules).total_fee_amount == 3.75

    def test_empty(self):
        stats = summarize_rules([])
        assert stats.total == 0
        assert stats.total_fee_amount == 0.0


class TestTopRules:
    def test_most_condition_groups_first(self):
        group = SUBTOTAL_AT_LEAST_100
        rules = [
            _rule("one", condition_groups=(group,)),
            _rule("none"),
            _rule("three", condition_groups=(group, group, group)),
            _rule("draft", status="draft", condition_groups=(group, group, group, group)),
            _rule("also-one", condition_groups=(group,)),
        ]
        assert [rule.id for rule in top_rules(rules)] == ["three", "one", "also-one", "none"]

    def test_limit(self):
        rules = [_rule(str(i)) for i in range(8)]
        assert [rule.id for rule in top_rules(rules)] == ["0", "1", "2", "3", "4"]
        assert len(top_rules(rules, limit=2)) == 2
