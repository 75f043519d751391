from __future__ import annotations

import re
from typing import Any

from .errors import ValidationError


# Maximum price: 9,999,999.99 in minor units
# This prevents database overflow issues and nonsensical prices
MAX_PRICE = 999_999_999

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def coerce_int(value: Any, field: str, *, minimum: int | None = None) -> int:
    """
    Strict integer coercion for JSON and path input.

    Accepts ints and plain digit strings; rejects bools, floats,
    decimals, and scientific notation.
    """
    if value is None:
        raise ValidationError(f"{field} is required")

    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        result = value
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            result = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    elif isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    else:
        raise ValidationError(f"{field} must be an integer")

    if minimum is not None and result < minimum:
        raise ValidationError(f"{field} must be >= {minimum}")
    return result


def coerce_str(
    value: Any,
    field: str,
    *,
    required: bool = True,
    max_length: int | None = None,
) -> str | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")

    result = value.strip()
    if max_length and len(result) > max_length:
        raise ValidationError(f"{field} exceeds max length {max_length}")
    return result


def coerce_price(value: Any, field: str = "price") -> int:
    price = coerce_int(value, field, minimum=0)
    if price > MAX_PRICE:
        raise ValidationError(f"{field} cannot exceed {MAX_PRICE}")
    return price


def coerce_email(value: Any, field: str = "email") -> str:
    email = coerce_str(value, field, max_length=255)
    if not EMAIL_RE.match(email):
        raise ValidationError(f"{field} must be a valid email address")
    return email.lower()


def parse_order_items(raw: Any) -> list[dict]:
    """
    Normalize the line items of an order request.

    Each item needs product_id, size, amount (> 0), and price (>= 0).
    """
    if not isinstance(raw, list) or not raw:
        raise ValidationError("order must contain at least one item")

    items = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValidationError(f"items[{index}] must be an object")
        items.append({
            "product_id": coerce_int(item.get("product_id"), f"items[{index}].product_id"),
            "size": coerce_int(item.get("size"), f"items[{index}].size"),
            "amount": coerce_int(item.get("amount"), f"items[{index}].amount", minimum=1),
            "price": coerce_price(item.get("price"), f"items[{index}].price"),
        })
    return items


def json_object(payload: Any) -> dict:
    """Request bodies must be JSON objects."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid request body")
    return payload
