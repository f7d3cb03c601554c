# Overview: Predictive restocking analytics over product and ledger snapshots.

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Iterable, Sequence

from ..models import Product, Transaction, reduces_stock
from ..time_utils import Clock, SystemClock, days_between, weeks_between
"""
Analytics Rules (authoritative)

All functions are pure reads over the snapshots they are handed; nothing here
mutates a product or the ledger. "now" comes from the injected clock and is
read once per public call, then threaded through every helper.

Usage = ledger entries whose type reduces stock (USAGE, SALE, DAMAGE, TRANSFER).
Windows are strict: an entry is inside an N-day window when
timestamp > now - N days.

- Weighted daily usage:
    weight_i = exp(-daysAgo_i / 30)            (daysAgo in whole days)
    rate     = (sum(q_i * w_i) / sum(w_i)) * (count / max(1, days(earliest, now)))
- Trend (>= 4 entries, else 0): split oldest-first at n // 2,
    clamp((mean2 - mean1) / mean1, -0.5, 0.5), 0 when mean1 == 0.
- Days until reorder (60-day window):
    ceil(max(0, stock - threshold) / max(rate * (1 + trend), 0.1)),
    NO_USAGE_DATA when the window is empty.
- Safety stock (90-day window): fewer than 3 entries -> 0.5 * threshold,
    else 1.65 * population stddev of weekly buckets * sqrt(1 week).
- Suggested reorder quantity:
    max(ceil(monthlyUsage * 2.5 + safetyStock - stock), max(threshold, 10)).
"""

# Sentinel returned by predict_days_until_reorder when a product has no usage
# in the trailing window. It is not a day count: it compares greater than any
# finite prediction and serializes as null.
NO_USAGE_DATA = math.inf

DECAY_DAYS = 30.0
REORDER_WINDOW_DAYS = 60
MONTHLY_WINDOW_DAYS = 30
VARIABILITY_WINDOW_DAYS = 90
RECENT_ACTIVITY_DAYS = 7
REORDER_HORIZON_DAYS = 14

MIN_DAILY_RATE = 0.1
TREND_CAP = 0.5
MIN_TREND_SAMPLES = 4
MIN_SAFETY_SAMPLES = 3
SAFETY_FACTOR = 1.65
SAFETY_LEAD_TIME_WEEKS = 1.0
TARGET_MONTHS_OF_SUPPLY = 2.5
MIN_ORDER_QUANTITY = 10
DEFAULT_TURNOVER_DAYS = 365.0
SLOW_MOVER_RATIO = 0.1
TOP_CATEGORY_LIMIT = 5


class InventoryAnalytics:
    def __init__(self, clock: Clock | None = None):
        self.clock = clock or SystemClock()

    def _now(self, now: datetime | None) -> datetime:
        return now if now is not None else self.clock.now()

    # -- building blocks ----------------------------------------------------

    def relevant_usage(
        self,
        product_id: int,
        transactions: Iterable[Transaction],
        days: int,
        now: datetime | None = None,
    ) -> list[Transaction]:
        """Stock-reducing entries for one product inside the trailing window."""
        cutoff = self._now(now) - timedelta(days=days)
        return [
            t for t in transactions
            if t.product_id == product_id and reduces_stock(t.type) and t.timestamp > cutoff
        ]

    def weighted_daily_usage(self, usage: Sequence[Transaction], now: datetime | None = None) -> float:
        """Exponentially decayed daily usage rate; recent entries weigh more."""
        if not usage:
            return 0.0
        now = self._now(now)

        total_weighted = 0.0
        total_weight = 0.0
        for t in usage:
            weight = math.exp(-days_between(t.timestamp, now) / DECAY_DAYS)
            total_weighted += t.quantity * weight
            total_weight += weight

        if total_weight == 0:
            return 0.0

        earliest = min(t.timestamp for t in usage)
        period_days = max(1, days_between(earliest, now))
        return (total_weighted / total_weight) * (len(usage) / period_days)

    def usage_trend(self, usage: Sequence[Transaction]) -> float:
        """Relative change between the older and newer half of usage, capped at +/-50%."""
        if len(usage) < MIN_TREND_SAMPLES:
            return 0.0

        ordered = sorted(usage, key=lambda t: (t.timestamp, t.id))
        mid = len(ordered) // 2
        first_mean = sum(t.quantity for t in ordered[:mid]) / mid
        second_mean = sum(t.quantity for t in ordered[mid:]) / (len(ordered) - mid)

        if first_mean == 0:
            return 0.0
        return max(-TREND_CAP, min(TREND_CAP, (second_mean - first_mean) / first_mean))

    def weekly_usage(self, usage: Sequence[Transaction], now: datetime | None = None) -> list[float]:
        """Usage bucketed into whole weeks from the earliest entry up to now."""
        if not usage:
            return []
        now = self._now(now)

        start = min(t.timestamp for t in usage)
        buckets = [0.0] * (weeks_between(start, now) + 1)
        for t in usage:
            index = weeks_between(start, t.timestamp)
            if 0 <= index < len(buckets):
                buckets[index] += t.quantity
        return buckets

    def monthly_usage(
        self,
        product_id: int,
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> float:
        usage = self.relevant_usage(product_id, transactions, MONTHLY_WINDOW_DAYS, now)
        return float(sum(t.quantity for t in usage))

    # -- per-product predictions -----------------------------------------

    def predict_days_until_reorder(
        self,
        product: Product,
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> int | float:
        """
        Days until stock falls to the reorder threshold.

        Returns NO_USAGE_DATA when there is no usage in the last 60 days.
        """
        now = self._now(now)
        usage = self.relevant_usage(product.id, transactions, REORDER_WINDOW_DAYS, now)
        if not usage:
            return NO_USAGE_DATA

        daily_rate = self.weighted_daily_usage(usage, now)
        if daily_rate <= 0:
            return NO_USAGE_DATA

        adjusted_rate = daily_rate * (1 + self.usage_trend(usage))
        stock_above_threshold = max(0, product.current_stock - product.min_threshold)
        return math.ceil(stock_above_threshold / max(adjusted_rate, MIN_DAILY_RATE))

    def safety_stock(
        self,
        product: Product,
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> float:
        now = self._now(now)
        usage = self.relevant_usage(product.id, transactions, VARIABILITY_WINDOW_DAYS, now)
        if len(usage) < MIN_SAFETY_SAMPLES:
            return product.min_threshold * 0.5

        weekly = self.weekly_usage(usage, now)
        mean = sum(weekly) / len(weekly)
        variance = sum((w - mean) ** 2 for w in weekly) / len(weekly)
        return SAFETY_FACTOR * math.sqrt(variance) * math.sqrt(SAFETY_LEAD_TIME_WEEKS)

    def lead_time_usage(
        self,
        product: Product,
        transactions: Iterable[Transaction],
        lead_time_days: int,
        now: datetime | None = None,
    ) -> float:
        """Expected consumption while a replenishment order is in transit."""
        now = self._now(now)
        usage = self.relevant_usage(product.id, transactions, MONTHLY_WINDOW_DAYS, now)
        return self.weighted_daily_usage(usage, now) * lead_time_days

    def suggest_reorder_quantity(
        self,
        product: Product,
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> int:
        now = self._now(now)
        transactions = list(transactions)
        target_stock = (
            self.monthly_usage(product.id, transactions, now) * TARGET_MONTHS_OF_SUPPLY
            + self.safety_stock(product, transactions, now)
        )
        minimum_order = max(product.min_threshold, MIN_ORDER_QUANTITY)
        suggested = math.ceil(target_stock - product.current_stock)
        return max(suggested, minimum_order)

    # -- catalog-wide views -----------------------------------------------

    def products_needing_reorder(
        self,
        products: Iterable[Product],
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> list[Product]:
        """
        Low-stock products, then products due within two weeks.

        Each group is ordered by ascending days until reorder.
        """
        now = self._now(now)
        transactions = list(transactions)

        flagged = []
        for product in products:
            days = self.predict_days_until_reorder(product, transactions, now)
            if product.is_low_stock or days <= REORDER_HORIZON_DAYS:
                flagged.append((0 if product.is_low_stock else 1, days, product))

        flagged.sort(key=lambda item: (item[0], item[1]))
        return [product for _, _, product in flagged]

    def top_categories_by_value(self, products: Iterable[Product]) -> dict[str, float]:
        totals: dict[str, float] = {}
        for product in products:
            totals[product.category] = totals.get(product.category, 0.0) + product.total_value
        # sorted() is stable, so equal values keep first-encountered order
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return dict(ranked[:TOP_CATEGORY_LIMIT])

    def recent_activity(
        self,
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> dict[str, int]:
        """Quantity moved per transaction type over the last seven days."""
        cutoff = self._now(now) - timedelta(days=RECENT_ACTIVITY_DAYS)
        summary: dict[str, int] = {}
        for t in transactions:
            if t.timestamp > cutoff:
                key = t.type.description
                summary[key] = summary.get(key, 0) + t.quantity
        return summary

    def turnover_days(
        self,
        product: Product,
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> float:
        now = self._now(now)
        usage = self.relevant_usage(product.id, transactions, VARIABILITY_WINDOW_DAYS, now)
        if not usage or product.current_stock == 0:
            return DEFAULT_TURNOVER_DAYS
        daily = self.weighted_daily_usage(usage, now)
        return product.current_stock / daily if daily > 0 else DEFAULT_TURNOVER_DAYS

    def average_turnover_days(
        self,
        products: Sequence[Product],
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> float:
        if not products:
            return DEFAULT_TURNOVER_DAYS
        now = self._now(now)
        transactions = list(transactions)
        total = sum(self.turnover_days(p, transactions, now) for p in products)
        return total / len(products)

    def slow_moving_products(
        self,
        products: Iterable[Product],
        transactions: Iterable[Transaction],
        now: datetime | None = None,
    ) -> list[Product]:
        """Products moving less than 10% of their stock per month (90-day average)."""
        now = self._now(now)
        transactions = list(transactions)
        slow = []
        for product in products:
            usage = self.relevant_usage(product.id, transactions, VARIABILITY_WINDOW_DAYS, now)
            monthly = sum(t.quantity for t in usage) / 3.0
            if monthly < product.current_stock * SLOW_MOVER_RATIO:
                slow.append(product)
        return slow
