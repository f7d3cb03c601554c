# Overview: Explicit inventory context bundling clock, settings, registry, ledger, analytics and stock operations.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .models import Product
from .services.alert_service import AlertObserver
from .services.analytics_service import InventoryAnalytics
from .services.inventory_service import StockOperations
from .services.ledger_service import TransactionLedger
from .services.products_service import ProductRegistry
from .services.reporting_service import (
    DashboardData,
    InventoryReport,
    InventoryStatistics,
    generate_report,
    inventory_statistics,
)
from .services.settings_service import InventorySettings
from .time_utils import Clock, SystemClock


@dataclass
class InventoryContext:
    """
    Everything a caller needs to work with one inventory.

    There is no module-level singleton: the web layer keeps one context on the
    Flask app, tests build their own with a FixedClock.
    """
    clock: Clock
    settings: InventorySettings
    registry: ProductRegistry
    ledger: TransactionLedger
    analytics: InventoryAnalytics
    stock: StockOperations

    # -- product-level analytics (NotFoundError for unknown ids) -----------

    def predict_days_until_reorder(self, product_id: int) -> int | float:
        product = self.registry.get(product_id)
        return self.analytics.predict_days_until_reorder(product, self.ledger.all(), self.clock.now())

    def suggest_reorder_quantity(self, product_id: int) -> int:
        product = self.registry.get(product_id)
        return self.analytics.suggest_reorder_quantity(product, self.ledger.all(), self.clock.now())

    def lead_time_usage(self, product_id: int) -> float:
        product = self.registry.get(product_id)
        return self.analytics.lead_time_usage(
            product,
            self.ledger.all(),
            self.settings.default_lead_time_days,
            self.clock.now(),
        )

    # -- catalog-wide -----------------------------------------------------

    def products_needing_reorder(self) -> list[Product]:
        return self.analytics.products_needing_reorder(
            self.registry.all(), self.ledger.all(), self.clock.now()
        )

    def generate_report(self) -> InventoryReport:
        return generate_report(self.registry.all(), self.ledger.all(), self.analytics, self.clock.now())

    def statistics(self) -> InventoryStatistics:
        return inventory_statistics(self.registry.all(), self.ledger.all(), self.clock.now())

    def dashboard(self) -> DashboardData:
        return DashboardData(
            statistics=self.statistics(),
            low_stock_products=self.registry.low_stock(),
            need_reorder_products=self.products_needing_reorder(),
            recent_transactions=self.ledger.recent(7),
        )


def build_context(
    clock: Clock | None = None,
    settings: InventorySettings | None = None,
    observers: Iterable[AlertObserver] = (),
    logger: logging.Logger | None = None,
) -> InventoryContext:
    clock = clock or SystemClock()
    registry = ProductRegistry()
    ledger = TransactionLedger(clock)
    analytics = InventoryAnalytics(clock)
    stock = StockOperations(
        registry,
        ledger,
        clock=clock,
        analytics=analytics,
        observers=observers,
        logger=logger,
    )
    return InventoryContext(
        clock=clock,
        settings=settings or InventorySettings(),
        registry=registry,
        ledger=ledger,
        analytics=analytics,
        stock=stock,
    )
