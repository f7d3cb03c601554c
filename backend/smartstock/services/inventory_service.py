# Overview: Stock operations; the only code path that changes a product's stock.

# backend/smartstock/services/inventory_service.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import timedelta
from typing import Iterable

from ..models import Product, TransactionType
from ..time_utils import Clock, SystemClock
from ..validation import (
    ConflictError,
    ValidationError,
    require_finite_amount,
    require_positive_quantity,
    require_text,
    validate_product_fields,
)
from .alert_service import AlertObserver, ReorderAlert, notify_observers
from .analytics_service import InventoryAnalytics
from .ledger_service import TransactionLedger, replay_stock
from .products_service import ProductRegistry
"""
Stock Invariants (authoritative)

- current_stock >= 0 at all times.
- Every stock change appends exactly one ledger entry while the product's
  lock is held, so per product the ledger order matches the order of changes.
- Replaying a product's ledger (reduce / increase / set) yields current_stock.
- Insufficient stock is a business refusal: the operation returns False and
  changes nothing. Bad input raises ValidationError before any change; unknown
  ids raise NotFoundError.
- unit_cost changes only on restock, as a stock-weighted average.
- A product can be deleted only when it has no ledger activity in the last
  30 days; its history stays in the ledger.
"""

DELETE_ACTIVITY_WINDOW_DAYS = 30


class StockOperations:
    def __init__(
        self,
        registry: ProductRegistry,
        ledger: TransactionLedger,
        *,
        clock: Clock | None = None,
        analytics: InventoryAnalytics | None = None,
        observers: Iterable[AlertObserver] = (),
        logger: logging.Logger | None = None,
    ):
        self.registry = registry
        self.ledger = ledger
        self.clock = clock or ledger.clock or SystemClock()
        self.analytics = analytics or InventoryAnalytics(self.clock)
        self.observers = list(observers)
        self.logger = logger or logging.getLogger(__name__)

    def _product_lock(self, product_id: int):
        """
        Per-product lock for an existing product.

        Unknown ids raise NotFoundError before a lock is created for them.
        Callers still re-read the product under the lock to catch a
        concurrent delete.
        """
        self.registry.get(product_id)
        return self.registry.locks.lock_for(product_id)

    # ============================
    # Product lifecycle
    # ============================

    def add_product(
        self,
        name: str,
        category: str,
        initial_stock: int,
        min_threshold: int,
        unit_cost: float,
        supplier: str,
    ) -> Product:
        validate_product_fields(
            name=name,
            category=category,
            stock=initial_stock,
            threshold=min_threshold,
            unit_cost=unit_cost,
            supplier=supplier,
        )

        now = self.clock.now()
        product = Product(
            id=self.registry.allocate_id(),
            name=name,
            category=category,
            current_stock=initial_stock,
            min_threshold=min_threshold,
            unit_cost=float(unit_cost),
            supplier=supplier,
            last_restocked=now,
            created_at=now,
        )

        with self.registry.locks.lock_for(product.id):
            if initial_stock > 0:
                self.ledger.append(
                    product.id,
                    TransactionType.RESTOCK,
                    initial_stock,
                    initial_stock * unit_cost,
                    "Initial stock entry",
                    "System",
                    stock_after=initial_stock,
                )
            self.registry.publish(product)

        self.logger.debug("Added product %s (%s) with %d units", product.id, name, initial_stock)
        return product

    def update_product(self, product: Product) -> Product:
        """
        Replace a product's descriptive fields (name, category, threshold, supplier).

        Stock level, unit cost and timestamps stay with the stored record.
        """
        with self._product_lock(product.id):
            current = self.registry.get(product.id)
            validate_product_fields(
                name=product.name,
                category=product.category,
                stock=product.current_stock,
                threshold=product.min_threshold,
                unit_cost=product.unit_cost,
                supplier=product.supplier,
            )
            updated = replace(
                current,
                name=product.name,
                category=product.category,
                min_threshold=product.min_threshold,
                supplier=product.supplier,
            )
            self.ledger.append(
                product.id,
                TransactionType.ADJUSTMENT,
                0,
                0.0,
                "Product information updated",
                "System",
                stock_after=updated.current_stock,
            )
            self.registry.publish(updated)
        return updated

    def delete_product(self, product_id: int) -> None:
        with self._product_lock(product_id):
            self.registry.get(product_id)
            since = self.clock.now() - timedelta(days=DELETE_ACTIVITY_WINDOW_DAYS)
            if self.ledger.has_activity_since(product_id, since):
                raise ConflictError("Cannot delete product with recent transaction history")
            self.registry.remove(product_id)
        self.registry.locks.discard(product_id)
        self.logger.debug("Deleted product %s", product_id)

    # ============================
    # Stock reductions
    # ============================

    def _remove_stock(
        self,
        product_id: int,
        quantity: int,
        tx_type: TransactionType,
        notes: str | None,
        performed_by: str | None,
        *,
        total_cost: float | None = None,
    ) -> bool:
        require_positive_quantity(quantity)

        with self._product_lock(product_id):
            product = self.registry.get(product_id)
            if product.current_stock < quantity:
                self.logger.debug(
                    "Refused %s of %d for product %s: only %d on hand",
                    tx_type.name, quantity, product_id, product.current_stock,
                )
                return False

            new_stock = product.current_stock - quantity
            cost = quantity * product.unit_cost if total_cost is None else total_cost
            self.ledger.append(
                product_id, tx_type, quantity, cost, notes, performed_by, stock_after=new_stock
            )
            updated = replace(product, current_stock=new_stock)
            self.registry.publish(updated)

        self._check_reorder_alert(updated)
        return True

    def use_stock(self, product_id: int, quantity: int, notes: str | None = None, performed_by: str | None = None) -> bool:
        return self._remove_stock(product_id, quantity, TransactionType.USAGE, notes, performed_by)

    def sell_stock(
        self,
        product_id: int,
        quantity: int,
        sale_price: float,
        notes: str | None = None,
        performed_by: str | None = None,
    ) -> bool:
        require_finite_amount(sale_price, "Sale price")
        return self._remove_stock(
            product_id, quantity, TransactionType.SALE, notes, performed_by, total_cost=sale_price
        )

    def record_damage(self, product_id: int, quantity: int, notes: str | None = None, performed_by: str | None = None) -> bool:
        return self._remove_stock(product_id, quantity, TransactionType.DAMAGE, notes, performed_by)

    def transfer_stock(
        self,
        product_id: int,
        quantity: int,
        destination: str,
        notes: str | None = None,
        performed_by: str | None = None,
    ) -> bool:
        require_text(destination, "Destination")
        note = f"Transfer to {destination}" + (f". {notes}" if notes else "")
        return self._remove_stock(product_id, quantity, TransactionType.TRANSFER, note, performed_by)

    # ============================
    # Stock increases / corrections
    # ============================

    def restock_product(
        self,
        product_id: int,
        quantity: int,
        total_cost: float,
        notes: str | None = None,
        performed_by: str | None = None,
    ) -> bool:
        require_positive_quantity(quantity)
        require_finite_amount(total_cost, "Total cost")

        with self._product_lock(product_id):
            product = self.registry.get(product_id)
            old_stock = product.current_stock
            new_stock = old_stock + quantity

            unit_cost = product.unit_cost
            if total_cost > 0:
                unit_cost = (old_stock * product.unit_cost + total_cost) / new_stock

            self.ledger.append(
                product_id, TransactionType.RESTOCK, quantity, total_cost, notes, performed_by,
                stock_after=new_stock,
            )
            self.registry.publish(replace(
                product,
                current_stock=new_stock,
                unit_cost=unit_cost,
                last_restocked=self.clock.now(),
            ))

        self.logger.debug("Restocked product %s with %d units", product_id, quantity)
        return True

    def return_stock(
        self,
        product_id: int,
        quantity: int,
        refund_amount: float = 0.0,
        notes: str | None = None,
        performed_by: str | None = None,
    ) -> bool:
        """Customer return: stock goes back on hand, unit cost is left alone."""
        require_positive_quantity(quantity)
        require_finite_amount(refund_amount, "Refund amount")
        if refund_amount < 0:
            raise ValidationError("Refund amount cannot be negative")

        with self._product_lock(product_id):
            product = self.registry.get(product_id)
            new_stock = product.current_stock + quantity
            self.ledger.append(
                product_id, TransactionType.RETURN, quantity, refund_amount, notes, performed_by,
                stock_after=new_stock,
            )
            self.registry.publish(replace(
                product,
                current_stock=new_stock,
                last_restocked=self.clock.now(),
            ))
        return True

    def adjust_stock(
        self,
        product_id: int,
        new_quantity: int,
        reason: str | None = None,
        performed_by: str | None = None,
    ) -> bool:
        if new_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")

        with self._product_lock(product_id):
            product = self.registry.get(product_id)
            old_quantity = product.current_stock
            self.ledger.append(
                product_id,
                TransactionType.ADJUSTMENT,
                abs(new_quantity - old_quantity),
                0.0,
                f"Stock adjusted from {old_quantity} to {new_quantity}. Reason: {reason}",
                performed_by,
                stock_after=new_quantity,
            )
            updated = replace(product, current_stock=new_quantity)
            if new_quantity > old_quantity:
                updated = replace(updated, last_restocked=self.clock.now())
            self.registry.publish(updated)

        if new_quantity <= updated.min_threshold:
            self._check_reorder_alert(updated)
        return True

    # ============================
    # Ledger reconciliation
    # ============================

    def reconcile(self, product_id: int) -> tuple[int, int]:
        """(current_stock, stock rebuilt from the ledger) for one product."""
        with self._product_lock(product_id):
            product = self.registry.get(product_id)
            history = self.ledger.history(product_id)
        return product.current_stock, replay_stock(history)

    # ============================
    # Reorder alerts
    # ============================

    def _check_reorder_alert(self, product: Product) -> ReorderAlert | None:
        if not product.is_low_stock or not self.observers:
            return None

        now = self.clock.now()
        transactions = self.ledger.all()
        alert = ReorderAlert(
            product_id=product.id,
            product_name=product.name,
            current_stock=product.current_stock,
            min_threshold=product.min_threshold,
            days_until_reorder=self.analytics.predict_days_until_reorder(product, transactions, now),
            suggested_quantity=self.analytics.suggest_reorder_quantity(product, transactions, now),
            raised_at=now,
        )
        notify_observers(self.observers, alert, self.logger)
        return alert

