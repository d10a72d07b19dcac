# src/flexfee/shared/comparison.py
"""
Comparison Utilities - Numeric and String Comparisons for Conditions

Files that USE this module:
- flexfee.application.predicates (every numeric and string condition)

Files that this module USES:
- None (pure utility functions)
"""
import math

# Prices are rounded to cents, so equality tolerates sub-cent drift
EQUALITY_EPSILON = 0.01

NUMERIC_OPERATORS = (">=", "<=", ">", "<", "==", "!=")
STRING_OPERATORS = ("==", "!=", "contains", "not_contains")


def compare_numeric(actual: float, operator: str, expected: float) -> bool:
    """
    Compare two numbers with the given operator.

    Ordering operators are exact; "==" and "!=" use EQUALITY_EPSILON.
    A NaN on either side never matches, whatever the operator.

    Args:
        actual: Value observed on the cart
        operator: One of ">=", "<=", ">", "<", "==", "!="
        expected: Authored threshold

    Returns:
        Comparison result, False for unknown operators
    """
    if math.isnan(actual) or math.isnan(expected):
        return False

    if operator == ">=":
        return actual >= expected
    if operator == "<=":
        return actual <= expected
    if operator == ">":
        return actual > expected
    if operator == "<":
        return actual < expected
    if operator == "==":
        return abs(actual - expected) < EQUALITY_EPSILON
    if operator == "!=":
        return abs(actual - expected) >= EQUALITY_EPSILON
    return False


def compare_string(actual: str, operator: str, expected: str) -> bool:
    """
    Case-insensitive string comparison.

    Args:
        actual: Value observed on the cart
        operator: One of "==", "!=", "contains", "not_contains"
        expected: Authored value

    Returns:
        Comparison result, False for unknown operators
    """
    actual_lower = actual.lower()
    expected_lower = expected.lower()

    if operator == "==":
        return actual_lower == expected_lower
    if operator == "!=":
        return actual_lower != expected_lower
    if operator == "contains":
        return expected_lower in actual_lower
    if operator == "not_contains":
        return expected_lower not in actual_lower
    return False
