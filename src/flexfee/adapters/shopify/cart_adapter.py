# src/flexfee/adapters/shopify/cart_adapter.py
"""
Cart Adapter - Building Cart Snapshots from External Payloads

This module converts cart payloads into CartSnapshot domain objects and
applies every default there (0 for missing numbers, "" for missing
strings, empty tuples for missing collections), so the engine never has
to.

Two payload shapes are supported:
- Storefront-style GraphQL carts (camelCase, edges/node connections)
- The plain snake_case CartSnapshot JSON used by the command line

Files that USE this module:
- flexfee.app (reads cart files)
- tests.test_cart_adapter (unit tests)

Files that this module USES:
- flexfee.domain.models (CartSnapshot, LineItem, Dimensions)
- flexfee.shared.validators (parse_amount for money strings)
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from flexfee.domain.errors import InvalidCartError
from flexfee.domain.models import CartSnapshot, Dimensions, LineItem
from flexfee.shared.validators import parse_amount

IN_STOCK = "in_stock"
OUT_OF_STOCK = "out_of_stock"

DIMENSION_KEYS = ("width", "height", "length")


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def connection_nodes(connection: Any) -> List[Mapping]:
    """Return the nodes of a GraphQL connection ({edges: [{node: ...}]})."""
    edges = _mapping(connection).get("edges") or []
    return [_mapping(edge).get("node") or {} for edge in edges if isinstance(edge, Mapping)]


def _strings(values: Any) -> tuple[str, ...]:
    if not isinstance(values, (list, tuple)):
        return ()
    return tuple(str(v) for v in values if v is not None)


def metafield_values(metafields: Any) -> Dict[str, Any]:
    """
    Read variant metafields as key -> value.

    Accepts both a connection of {key, value} nodes and a mapping keyed by
    metafield key with {value} entries.
    """
    if isinstance(metafields, Mapping) and "edges" not in metafields:
        return {
            key: _mapping(entry).get("value")
            for key, entry in metafields.items()
        }
    return {
        node.get("key"): node.get("value")
        for node in connection_nodes(metafields)
        if node.get("key")
    }


def _positive_or_none(value: Any) -> Optional[float]:
    parsed = parse_amount(value)
    return parsed if parsed > 0 else None


def _shopify_line_item(node: Mapping) -> LineItem:
    product = _mapping(node.get("product"))
    variant = _mapping(node.get("variant"))
    metafields = metafield_values(variant.get("metafields"))

    # Zero inventory is indistinguishable from "not tracked" here
    inventory = variant.get("inventoryQuantity")
    stock = float(inventory) if isinstance(inventory, (int, float)) and inventory else None

    return LineItem(
        product_id=str(product.get("id") or ""),
        variant_id=str(variant.get("id") or ""),
        quantity=int(parse_amount(node.get("quantity"))),
        price=parse_amount(variant.get("price")),
        weight=parse_amount(variant.get("weight")),
        collection_ids=tuple(
            str(c.get("id")) for c in connection_nodes(product.get("collections")) if c.get("id")
        ),
        stock=stock,
        stock_status=IN_STOCK if variant.get("availableForSale") else OUT_OF_STOCK,
        dimensions=Dimensions(
            **{key: _positive_or_none(metafields.get(key)) for key in DIMENSION_KEYS}
        ),
    )


def cart_from_shopify(cart: Mapping[str, Any]) -> CartSnapshot:
    """
    Convert a Storefront-style cart payload to a CartSnapshot.

    Args:
        cart: Cart object (subtotalPrice, totalTax, lineItems, discountCodes,
              shippingAddress, customer)

    Returns:
        CartSnapshot with all defaults applied

    Raises:
        InvalidCartError: If cart is not a mapping
    """
    if not isinstance(cart, Mapping):
        raise InvalidCartError("Cart payload must be an object")

    line_items = tuple(_shopify_line_item(node) for node in connection_nodes(cart.get("lineItems")))
    subtotal = parse_amount(_mapping(cart.get("subtotalPrice")).get("amount"))
    address = _mapping(cart.get("shippingAddress"))

    return CartSnapshot(
        subtotal=subtotal,
        subtotal_ex_tax=subtotal,
        tax=parse_amount(_mapping(cart.get("totalTax")).get("amount")),
        total_quantity=sum(item.quantity for item in line_items),
        total_weight=sum(item.weight * item.quantity for item in line_items),
        product_ids=tuple(item.product_id for item in line_items),
        coupon_codes=tuple(
            str(code.get("code"))
            for code in cart.get("discountCodes") or []
            if isinstance(code, Mapping) and code.get("code")
        ),
        customer_tags=_strings(_mapping(cart.get("customer")).get("tags")),
        shipping_country=str(address.get("country") or ""),
        shipping_state=str(address.get("province") or ""),
        shipping_city=str(address.get("city") or ""),
        shipping_zipcode=str(address.get("zip") or ""),
        line_items=line_items,
    )


def _optional_amount(value: Any) -> Optional[float]:
    if value is None:
        return None
    return parse_amount(value)


def _line_item_from_mapping(data: Mapping) -> LineItem:
    dimensions = _mapping(data.get("dimensions"))
    stock_status = data.get("stock_status")
    return LineItem(
        product_id=str(data.get("product_id") or ""),
        variant_id=str(data.get("variant_id") or ""),
        quantity=int(parse_amount(data.get("quantity"))),
        price=parse_amount(data.get("price")),
        weight=parse_amount(data.get("weight")),
        collection_ids=_strings(data.get("collection_ids")),
        stock=_optional_amount(data.get("stock")),
        stock_status=str(stock_status) if stock_status is not None else None,
        dimensions=Dimensions(
            **{key: _optional_amount(dimensions.get(key)) for key in DIMENSION_KEYS}
        ),
    )


def cart_from_mapping(data: Mapping[str, Any]) -> CartSnapshot:
    """
    Build a CartSnapshot from its plain snake_case JSON form.

    Missing numbers default to 0 (subtotal_ex_tax stays None so it falls
    back to subtotal), missing strings to "", missing lists to empty.

    Raises:
        InvalidCartError: If data is not a mapping
    """
    if not isinstance(data, Mapping):
        raise InvalidCartError("Cart payload must be an object")

    raw_items = data.get("line_items") or []
    line_items = tuple(
        _line_item_from_mapping(item) for item in raw_items if isinstance(item, Mapping)
    )
    shipping = _mapping(data.get("shipping"))

    def _shipping(key: str) -> str:
        return str(data.get(f"shipping_{key}") or shipping.get(key) or "")

    return CartSnapshot(
        subtotal=parse_amount(data.get("subtotal")),
        subtotal_ex_tax=_optional_amount(data.get("subtotal_ex_tax")),
        tax=parse_amount(data.get("tax")),
        total_quantity=parse_amount(data.get("total_quantity")),
        total_weight=parse_amount(data.get("total_weight")),
        product_ids=_strings(data.get("product_ids")),
        coupon_codes=_strings(data.get("coupon_codes")),
        customer_tags=_strings(data.get("customer_tags")),
        shipping_country=_shipping("country"),
        shipping_state=_shipping("state"),
        shipping_city=_shipping("city"),
        shipping_zipcode=_shipping("zipcode"),
        line_items=line_items,
    )
