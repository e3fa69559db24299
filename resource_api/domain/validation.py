"""
Field rules for resource payloads.

Both validators inspect a raw JSON object and return every violated rule in
field order (name, description, category, price, quantity); an empty list
means the payload passes. Nothing here touches storage.
"""
from __future__ import annotations

import math
import sys
from typing import Any, Dict, List

FIELDS = ("name", "description", "category", "price", "quantity")
_TEXT_FIELDS = ("name", "description", "category")

# largest value an SQLite INTEGER column can hold
INT64_MAX = 2**63 - 1


def _is_number(v: Any) -> bool:
    # JSON true/false arrive as bool, which is an int subclass
    if not isinstance(v, (int, float)) or isinstance(v, bool):
        return False
    return isinstance(v, int) or math.isfinite(v)


def _is_text(v: Any) -> bool:
    return isinstance(v, str) and len(v.strip()) > 0


def _is_price(v: Any) -> bool:
    return _is_number(v) and 0 <= v <= sys.float_info.max


def _is_quantity(v: Any) -> bool:
    if not _is_number(v) or v < 0 or v > INT64_MAX:
        return False
    return isinstance(v, int) or float(v).is_integer()


def validate_resource(payload: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    for field in _TEXT_FIELDS:
        if not _is_text(payload.get(field)):
            errors.append(f"{field.capitalize()} is required and must be a non-empty string")
    if not _is_price(payload.get("price")):
        errors.append("Price is required and must be a non-negative number")
    if not _is_quantity(payload.get("quantity")):
        errors.append("Quantity is required and must be a non-negative integer")
    return errors


def validate_resource_update(payload: Dict[str, Any]) -> List[str]:
    """Same rules as creation, applied only to the fields that are present."""
    errors: List[str] = []
    for field in _TEXT_FIELDS:
        if field in payload and not _is_text(payload[field]):
            errors.append(f"{field.capitalize()} must be a non-empty string")
    if "price" in payload and not _is_price(payload["price"]):
        errors.append("Price must be a non-negative number")
    if "quantity" in payload and not _is_quantity(payload["quantity"]):
        errors.append("Quantity must be a non-negative integer")
    return errors


def update_fields(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Recognized fields present in the payload; unknown keys are dropped."""
    return {k: payload[k] for k in FIELDS if k in payload}
