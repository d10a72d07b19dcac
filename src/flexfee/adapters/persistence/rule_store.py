# src/flexfee/adapters/persistence/rule_store.py
"""
Rule Store - Fee Rule Persistence

This module reads and writes a shop's fee rules as a JSON file. Records
use the shape the rule editor stores: camelCase keys, condition groups
with an explicit order, and list-valued conditions stored as JSON strings.
Records are validated with pydantic and converted to domain FeeRules.

Files that USE this module:
- flexfee.application.fee_service (FileRuleSource uses load_rules)
- flexfee.app (loads rules for the command line)
- tests.test_rule_store (unit tests)

Files that this module USES:
- flexfee.config (settings for the default rule file and strictness)
- flexfee.domain (FeeRule, ConditionGroup, build_condition, errors)
- flexfee.shared.validators (decode_condition_value, validate_sign)
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from flexfee.config import settings
from flexfee.domain.conditions import build_condition
from flexfee.domain.errors import InvalidRuleError, RuleStoreError, UnknownConditionTypeError
from flexfee.domain.models import Combinator, ConditionGroup, FeeRule, RuleStatus
from flexfee.shared.validators import decode_condition_value, validate_sign

logger = logging.getLogger(__name__)


class ConditionRecord(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str
    operator: str = ""
    value: Any = None

    @field_validator("operator", mode="before")
    @classmethod
    def default_operator(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("value", mode="before")
    @classmethod
    def decode_value(cls, v: Any) -> Any:
        return decode_condition_value(v)


class ConditionGroupRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    and_or: str = Field(default="and", alias="andOr")
    order: int = 0
    conditions: List[ConditionRecord] = Field(default_factory=list)

    @field_validator("and_or", mode="before")
    @classmethod
    def default_and_or(cls, v: Any) -> Any:
        return v or "and"


class FeeRuleRecord(BaseModel):
    """Stored fee rule, as written by the rule editor."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    title: str
    amount: float
    calculation_type: str = Field(alias="calculationType")
    sign: str = "+"
    tax_class: Optional[str] = Field(default=None, alias="taxClass")
    status: str = RuleStatus.DRAFT.value
    priority: int = 0
    parent_and_or: str = Field(default="and", alias="parentAndOr")
    condition_groups: List[ConditionGroupRecord] = Field(
        default_factory=list, alias="conditionGroups"
    )

    @field_validator("id", mode="before")
    @classmethod
    def id_to_str(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("title")
    @classmethod
    def title_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title is required")
        return v

    @field_validator("calculation_type")
    @classmethod
    def calculation_type_required(cls, v: str) -> str:
        if not v:
            raise ValueError("calculationType is required")
        return v

    @field_validator("sign", mode="before")
    @classmethod
    def check_sign(cls, v: Any) -> Any:
        if v is None or v == "":
            return "+"
        if not validate_sign(v):
            raise ValueError("sign must be '+' or '-'")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return v or RuleStatus.DRAFT.value

    @field_validator("priority", mode="before")
    @classmethod
    def default_priority(cls, v: Any) -> Any:
        return 0 if v is None or v == "" else v

    @field_validator("tax_class", mode="before")
    @classmethod
    def empty_tax_class(cls, v: Any) -> Any:
        return v or None

    @field_validator("parent_and_or", mode="before")
    @classmethod
    def default_parent_and_or(cls, v: Any) -> Any:
        return v or "and"

    def to_domain(self, strict: bool = False) -> FeeRule:
        """
        Convert the record to a FeeRule.

        Raises:
            ValueError: If a combinator tag is not "and"/"or"
            UnknownConditionTypeError: If strict and a condition tag is unknown
        """
        # sorted() is stable, so groups sharing an order keep file order
        groups = tuple(
            ConditionGroup(
                combinator=Combinator.parse(group.and_or),
                conditions=tuple(
                    build_condition(c.type, c.operator, c.value, strict=strict)
                    for c in group.conditions
                ),
            )
            for group in sorted(self.condition_groups, key=lambda g: g.order)
        )
        return FeeRule(
            id=self.id,
            title=self.title,
            amount=self.amount,
            calculation_type=self.calculation_type,
            sign=self.sign,
            tax_class=self.tax_class,
            status=self.status,
            priority=self.priority,
            group_combinator=Combinator.parse(self.parent_and_or),
            condition_groups=groups,
        )


def rule_from_record(record: Mapping[str, Any], strict: bool = False) -> FeeRule:
    """
    Build a FeeRule from a stored record.

    Args:
        record: Stored rule (camelCase keys)
        strict: Raise on unknown condition types

    Returns:
        FeeRule domain object

    Raises:
        InvalidRuleError: If the record is not a valid rule
    """
    try:
        parsed = FeeRuleRecord.model_validate(record)
    except ValidationError as e:
        raise InvalidRuleError(f"Invalid fee rule record: {e}") from e

    try:
        return parsed.to_domain(strict=strict)
    except UnknownConditionTypeError:
        raise
    except ValueError as e:
        raise InvalidRuleError(f"Invalid fee rule {parsed.id}: {e}") from e


def _condition_to_record(condition) -> dict:
    value = condition.value
    if isinstance(value, tuple):
        # List values are stored JSON-encoded
        value = json.dumps(list(value))
    condition_type = condition.type
    return {
        "type": getattr(condition_type, "value", condition_type),
        "operator": condition.operator,
        "value": value,
    }


def rule_to_record(rule: FeeRule) -> dict:
    """Convert a FeeRule back to its stored record form."""
    return {
        "id": rule.id,
        "title": rule.title,
        "amount": rule.amount,
        "calculationType": rule.calculation_type,
        "sign": rule.sign,
        "taxClass": rule.tax_class,
        "status": rule.status,
        "priority": rule.priority,
        "parentAndOr": rule.group_combinator.value,
        "conditionGroups": [
            {
                "andOr": group.combinator.value,
                "order": index,
                "conditions": [_condition_to_record(c) for c in group.conditions],
            }
            for index, group in enumerate(rule.condition_groups)
        ],
    }


def _read_records(path: Path) -> list:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RuleStoreError(f"Rule file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise RuleStoreError(f"Failed to read rule file {path}: {e}") from e

    if isinstance(data, Mapping):
        data = data.get("rules", [])
    if not isinstance(data, list):
        raise RuleStoreError(f"Rule file {path} must contain a list of rules")
    return data


def load_rules(path: Optional[Path] = None, strict: Optional[bool] = None) -> List[FeeRule]:
    """
    Load fee rules from the rule file.

    A missing file means the shop has no rules. Records that are not valid
    rules are logged and skipped.

    Args:
        path: Rule file (default: settings.rules_file)
        strict: Strict condition parsing (default: settings.strict_conditions)

    Returns:
        Fee rules in file order

    Raises:
        RuleStoreError: If the file cannot be read or is not a JSON rule list
        UnknownConditionTypeError: If strict and a rule uses an unknown condition type
    """
    p = Path(path) if path is not None else settings.rules_file
    if strict is None:
        strict = settings.strict_conditions

    if not p.exists():
        logger.info("Rule file %s not found, no fee rules loaded", p)
        return []

    rules: List[FeeRule] = []
    for index, record in enumerate(_read_records(p)):
        try:
            rules.append(rule_from_record(record, strict=strict))
        except UnknownConditionTypeError:
            raise
        except InvalidRuleError as e:
            logger.warning("Skipping fee rule #%d in %s: %s", index, p, e)
    logger.debug("Loaded %d fee rule(s) from %s", len(rules), p)
    return rules


def save_rules(rules: Iterable[FeeRule], path: Optional[Path] = None) -> None:
    """
    Save fee rules to the rule file using an atomic write.

    Args:
        rules: Rules to save
        path: Rule file (default: settings.rules_file)

    Raises:
        RuleStoreError: If the file cannot be written
    """
    p = Path(path) if path is not None else settings.rules_file
    p.parent.mkdir(parents=True, exist_ok=True)
    records = [rule_to_record(rule) for rule in rules]

    temp_fd, temp_path = tempfile.mkstemp(suffix=".json.tmp", dir=str(p.parent), text=True)
    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, str(p))
    except Exception as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise RuleStoreError(f"Failed to save rule file: {e}") from e
