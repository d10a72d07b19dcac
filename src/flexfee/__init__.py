# src/flexfee/__init__.py
"""
FlexFee - Conditional Fee Rule Engine

Evaluates merchant-authored fee rules (nested AND/OR condition groups)
against a cart snapshot and returns the fees to apply at checkout, in
priority order.
"""

__version__ = "1.0.0"
