# Overview: Inventory health report, aggregate statistics, dashboard bundle and the plain-text demo report.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Sequence

from ..models import Product, Transaction
from ..time_utils import to_utc_z
from .analytics_service import NO_USAGE_DATA, RECENT_ACTIVITY_DAYS, InventoryAnalytics


@dataclass
class InventoryReport:
    report_date: datetime
    total_products: int
    total_value: float
    low_stock_count: int
    out_of_stock_count: int
    products_needing_reorder: list[Product]
    top_categories: dict[str, float]
    recent_activity: dict[str, int]
    average_turnover_days: float
    slow_moving_products: list[Product]

    def to_dict(self) -> dict:
        return {
            "report_date": to_utc_z(self.report_date),
            "total_products": self.total_products,
            "total_value": self.total_value,
            "low_stock_count": self.low_stock_count,
            "out_of_stock_count": self.out_of_stock_count,
            "products_needing_reorder": [p.to_dict() for p in self.products_needing_reorder],
            "top_categories": [
                {"category": category, "value": value}
                for category, value in self.top_categories.items()
            ],
            "recent_activity": self.recent_activity,
            "average_turnover_days": self.average_turnover_days,
            "slow_moving_products": [p.to_dict() for p in self.slow_moving_products],
        }


@dataclass
class InventoryStatistics:
    total_products: int = 0
    total_value: float = 0.0
    total_stock_units: int = 0
    low_stock_count: int = 0
    out_of_stock_count: int = 0
    categories_count: int = 0
    recent_transactions_count: int = 0

    def to_dict(self) -> dict:
        return {
            "total_products": self.total_products,
            "total_value": self.total_value,
            "total_stock_units": self.total_stock_units,
            "low_stock_count": self.low_stock_count,
            "out_of_stock_count": self.out_of_stock_count,
            "categories_count": self.categories_count,
            "recent_transactions_count": self.recent_transactions_count,
        }


@dataclass
class DashboardData:
    statistics: InventoryStatistics
    low_stock_products: list[Product] = field(default_factory=list)
    need_reorder_products: list[Product] = field(default_factory=list)
    recent_transactions: list[Transaction] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "statistics": self.statistics.to_dict(),
            "low_stock_products": [p.to_dict() for p in self.low_stock_products],
            "need_reorder_products": [p.to_dict() for p in self.need_reorder_products],
            "recent_transactions": [t.to_dict() for t in self.recent_transactions],
        }


def generate_report(
    products: Sequence[Product],
    transactions: Sequence[Transaction],
    analytics: InventoryAnalytics,
    now: datetime,
) -> InventoryReport:
    """
    Build the inventory health report.

    One "now" is used for every section so the windows line up.
    """
    return InventoryReport(
        report_date=now,
        total_products=len(products),
        total_value=sum(p.total_value for p in products),
        low_stock_count=sum(1 for p in products if p.is_low_stock),
        out_of_stock_count=sum(1 for p in products if p.current_stock == 0),
        products_needing_reorder=analytics.products_needing_reorder(products, transactions, now),
        top_categories=analytics.top_categories_by_value(products),
        recent_activity=analytics.recent_activity(transactions, now),
        average_turnover_days=analytics.average_turnover_days(products, transactions, now),
        slow_moving_products=analytics.slow_moving_products(products, transactions, now),
    )


def inventory_statistics(
    products: Sequence[Product],
    transactions: Sequence[Transaction],
    now: datetime,
) -> InventoryStatistics:
    week_ago = now - timedelta(days=RECENT_ACTIVITY_DAYS)
    return InventoryStatistics(
        total_products=len(products),
        total_value=sum(p.total_value for p in products),
        total_stock_units=sum(p.current_stock for p in products),
        low_stock_count=sum(1 for p in products if p.is_low_stock),
        out_of_stock_count=sum(1 for p in products if p.current_stock == 0),
        categories_count=len({p.category for p in products}),
        recent_transactions_count=sum(1 for t in transactions if t.timestamp > week_ago),
    )


def _truncate(value: str, length: int) -> str:
    return value if len(value) <= length else value[: length - 3] + "..."


def render_text_report(ctx) -> str:
    """Plain-text overview used by the CLI demo."""
    now = ctx.clock.now()
    products = ctx.registry.all()
    transactions = ctx.ledger.all()
    analytics = ctx.analytics
    stats = inventory_statistics(products, transactions, now)
    report = generate_report(products, transactions, analytics, now)

    lines = [
        "=== INVENTORY OVERVIEW ===",
        f"Total Products: {stats.total_products}",
        f"Total Value: ${stats.total_value:.2f}",
        f"Low Stock Count: {stats.low_stock_count}",
        f"Categories: {stats.categories_count}",
        "",
        f"{'ID':<5} {'Name':<15} {'Category':<12} {'Stock':<8} {'Min':<8} {'Status':<12}",
        "-" * 65,
    ]
    for p in products:
        lines.append(
            f"{p.id:<5} {_truncate(p.name, 15):<15} {_truncate(p.category, 12):<12} "
            f"{p.current_stock:<8} {p.min_threshold:<8} {p.stock_status:<12}"
        )

    lines += [
        "",
        "=== PREDICTIVE ANALYTICS ===",
        f"{'ID':<5} {'Product':<15} {'Stock':<8} {'Days to Reorder':<15} {'Suggested':<12}",
        "-" * 60,
    ]
    for p in products:
        days = analytics.predict_days_until_reorder(p, transactions, now)
        days_label = "No data" if days == NO_USAGE_DATA else f"{days}d"
        suggested = analytics.suggest_reorder_quantity(p, transactions, now)
        lines.append(
            f"{p.id:<5} {_truncate(p.name, 15):<15} {p.current_stock:<8} {days_label:<15} {suggested:<12}"
        )

    lines += ["", "=== LOW STOCK ALERTS ==="]
    low_stock = ctx.registry.low_stock()
    if not low_stock:
        lines.append("No low stock products")
    else:
        lines.append("Low Stock Products:")
        lines += [f"  {p.name} - Stock: {p.current_stock}" for p in low_stock]
    if report.products_needing_reorder:
        lines += ["", "Products Needing Reorder:"]
        for p in report.products_needing_reorder:
            suggested = analytics.suggest_reorder_quantity(p, transactions, now)
            lines.append(f"  {p.name} - Suggest ordering: {suggested} units")

    lines += [
        "",
        "=== COMPREHENSIVE REPORT ===",
        f"Report Date: {report.report_date.date().isoformat()}",
        f"Total Products: {report.total_products}",
        f"Total Value: ${report.total_value:.2f}",
        f"Average Turnover: {report.average_turnover_days:.1f} days",
        "",
        "Top Categories by Value:",
    ]
    lines += [f"  {category}: ${value:.2f}" for category, value in report.top_categories.items()]
    lines += ["", "Recent Activity (Last 7 Days):"]
    lines += [f"  {kind}: {quantity} units" for kind, quantity in report.recent_activity.items()]
    return "\n".join(lines)
