from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timedelta

from ..time_utils import days_between, to_utc_z


class TransactionType(enum.Enum):
    """Kinds of stock-affecting ledger entries."""

    USAGE = "Usage/Consumption"
    SALE = "Sale"
    RESTOCK = "Restock/Purchase"
    ADJUSTMENT = "Manual Adjustment"
    RETURN = "Return/Refund"
    DAMAGE = "Damaged Goods"
    TRANSFER = "Transfer"

    @property
    def description(self) -> str:
        return self.value


REDUCING_TYPES = frozenset({
    TransactionType.USAGE,
    TransactionType.SALE,
    TransactionType.DAMAGE,
    TransactionType.TRANSFER,
})
INCREASING_TYPES = frozenset({TransactionType.RESTOCK, TransactionType.RETURN})


def reduces_stock(tx_type: TransactionType) -> bool:
    return tx_type in REDUCING_TYPES


def increases_stock(tx_type: TransactionType) -> bool:
    return tx_type in INCREASING_TYPES


def parse_transaction_type(value: str) -> TransactionType:
    """Accepts the enum name ("SALE") or its description ("Sale")."""
    key = (value or "").strip()
    try:
        return TransactionType[key.upper()]
    except KeyError:
        pass
    for member in TransactionType:
        if member.description.lower() == key.lower():
            return member
    raise ValueError(f"unknown transaction type: {value!r}")


@dataclass(frozen=True)
class Product:
    """
    Catalog entry with its live stock level.

    Records are immutable: stock operations publish a replacement record, so a
    reader holding a Product always sees a consistent set of fields.
    """
    id: int
    name: str
    category: str
    current_stock: int
    min_threshold: int
    unit_cost: float
    supplier: str
    last_restocked: datetime
    created_at: datetime

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_threshold

    @property
    def is_out_of_stock(self) -> bool:
        return self.current_stock == 0

    @property
    def total_value(self) -> float:
        return self.current_stock * self.unit_cost

    @property
    def stock_status(self) -> str:
        if self.current_stock == 0:
            return "OUT OF STOCK"
        if self.is_low_stock:
            return "LOW STOCK"
        return "IN STOCK"

    def days_since_restock(self, now: datetime) -> int:
        return days_between(self.last_restocked, now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "current_stock": self.current_stock,
            "min_threshold": self.min_threshold,
            "unit_cost": self.unit_cost,
            "supplier": self.supplier,
            "last_restocked": to_utc_z(self.last_restocked),
            "created_at": to_utc_z(self.created_at),
            "stock_status": self.stock_status,
            "low_stock": self.is_low_stock,
            "total_value": self.total_value,
        }


@dataclass(frozen=True)
class Transaction:
    """
    Immutable ledger entry.

    quantity is always a magnitude; the direction comes from the type.
    stock_after is the product's stock level right after this entry was
    applied (it is what an ADJUSTMENT sets the stock to on replay).
    """
    id: int
    product_id: int
    type: TransactionType
    quantity: int
    total_cost: float
    timestamp: datetime
    notes: str
    performed_by: str
    stock_after: int

    @property
    def unit_cost(self) -> float:
        return self.total_cost / self.quantity if self.quantity != 0 else 0.0

    @property
    def effective_change(self) -> int:
        if increases_stock(self.type):
            return self.quantity
        if reduces_stock(self.type):
            return -self.quantity
        return self.quantity

    @property
    def impact_description(self) -> str:
        if reduces_stock(self.type):
            return f"Reduced stock by {self.quantity} units"
        if increases_stock(self.type):
            return f"Increased stock by {self.quantity} units"
        return f"Adjusted stock by {self.quantity} units"

    def is_recent(self, now: datetime) -> bool:
        return self.timestamp > now - timedelta(hours=24)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "type": self.type.name,
            "type_description": self.type.description,
            "quantity": self.quantity,
            "total_cost": self.total_cost,
            "unit_cost": self.unit_cost,
            "timestamp": to_utc_z(self.timestamp),
            "notes": self.notes,
            "performed_by": self.performed_by,
            "stock_after": self.stock_after,
            "impact": self.impact_description,
        }
