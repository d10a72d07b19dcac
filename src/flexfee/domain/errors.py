# src/flexfee/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions raised at the boundary
where stored rules and cart payloads are turned into domain objects.
The evaluation engine itself never raises them.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class InvalidRuleError(DomainError):
    """Raised when a stored rule record cannot be turned into a FeeRule."""
    pass


class UnknownConditionTypeError(InvalidRuleError):
    """Raised by strict parsing when a condition type tag is not known."""
    pass


class InvalidCartError(DomainError):
    """Raised when a cart payload is not in a usable shape."""
    pass


class RuleStoreError(DomainError):
    """Raised when the rule file cannot be read or decoded."""
    pass
