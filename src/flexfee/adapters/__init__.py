# src/flexfee/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Shopify (cart payloads and fee lines)
- Persistence (rule storage)
- Formatting (output)
"""

__all__ = []
