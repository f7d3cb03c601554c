from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


class InventoryError(ValueError):
    """Base class for errors reported to the immediate caller."""


class ValidationError(InventoryError):
    """400-level input problem."""


class NotFoundError(InventoryError):
    """404-level missing entity (unknown product id)."""


class ConflictError(InventoryError):
    """409-level business rule conflict (e.g., deleting a product with recent activity)."""


# Payload field kinds understood by validate_payload
INT = "int"
FLOAT = "float"
STR = "str"


@dataclass(frozen=True)
class PayloadPolicy:
    """
    Central policy layer for JSON bodies:
    - fields: field name -> kind (INT, FLOAT, STR); anything else is rejected
    - required: fields that must be present
    """
    fields: dict[str, str]
    required: set[str] = field(default_factory=set)


def _coerce_value(key: str, kind: str, value: Any):
    # Integers - strict validation to reject floats and scientific notation
    if kind == INT:
        # Already an int (but not bool which is a subclass of int)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValidationError(f"{key} must be an integer")
            if "e" in stripped.lower():
                raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
            if "." in stripped:
                raise ValidationError(f"{key} must be an integer (no decimals)")
            try:
                return int(stripped)
            except ValueError:
                raise ValidationError(f"{key} must be an integer")
        if isinstance(value, float):
            raise ValidationError(f"{key} must be an integer, not a decimal")
        raise ValidationError(f"{key} must be an integer")

    if kind == FLOAT:
        if isinstance(value, bool):
            raise ValidationError(f"{key} must be a number")
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                raise ValidationError(f"{key} must be a number")
        else:
            raise ValidationError(f"{key} must be a number")
        # float() accepts "nan" and "inf"
        if not math.isfinite(number):
            raise ValidationError(f"{key} must be a finite number")
        return number

    if kind == STR:
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{key} must be a string")
        return str(value).strip()

    return value


def validate_payload(*, payload: Any, policy: PayloadPolicy) -> dict:
    """
    Validates + normalizes an incoming JSON body against a PayloadPolicy.

    Unknown fields are rejected, required fields enforced, values coerced.
    Null values are dropped so callers can apply their own defaults.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    missing = sorted(f for f in policy.required if payload.get(f) is None)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    patch: dict = {}
    for k, raw in payload.items():
        if k not in policy.fields:
            raise ValidationError(f"Field not allowed: {k}")
        if raw is None:
            continue
        patch[k] = _coerce_value(k, policy.fields[k], raw)
    return patch


def require_text(value: Any, label: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} cannot be empty")
    return str(value)


def validate_product_fields(
    *,
    name: Any,
    category: Any,
    stock: int,
    threshold: int,
    unit_cost: float,
    supplier: Any,
) -> None:
    """Product-level rules shared by create and update."""
    require_text(name, "Product name")
    require_text(category, "Category")
    if stock < 0:
        raise ValidationError("Stock cannot be negative")
    if threshold < 0:
        raise ValidationError("Minimum threshold cannot be negative")
    require_finite_amount(unit_cost, "Unit cost")
    if unit_cost < 0:
        raise ValidationError("Unit cost cannot be negative")
    require_text(supplier, "Supplier")


def require_positive_quantity(quantity: int) -> None:
    if quantity <= 0:
        raise ValidationError("Quantity must be positive")


def require_finite_amount(amount: float, label: str) -> None:
    if not math.isfinite(amount):
        raise ValidationError(f"{label} must be a finite number")
