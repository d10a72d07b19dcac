# src/flexfee/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains adapters for persisting data:
- File-based fee rule storage (JSON)
"""

from flexfee.adapters.persistence.rule_store import (
    load_rules,
    rule_from_record,
    rule_to_record,
    save_rules,
)

__all__ = [
    "load_rules",
    "rule_from_record",
    "rule_to_record",
    "save_rules",
]
