import math

import pytest

from smartstock.models import Transaction, TransactionType
from smartstock.services.analytics_service import NO_USAGE_DATA, InventoryAnalytics
from tests.conftest import NOW, days_ago, record_at


def _usage(quantity, when, tx_id=1, product_id=1, tx_type=TransactionType.USAGE):
    return Transaction(
        id=tx_id,
        product_id=product_id,
        type=tx_type,
        quantity=quantity,
        total_cost=0.0,
        timestamp=when,
        notes="",
        performed_by="System",
        stock_after=0,
    )


@pytest.fixture
def analytics(clock):
    return InventoryAnalytics(clock)


def _seed_three_uses(ctx, clock):
    """minThreshold=10, unitCost=10, 50 units; 5 used 20, 10 and 5 days ago."""
    product = record_at(clock, days_ago(20), ctx.stock.add_product, "Widget", "Parts", 50, 10, 10.0, "Acme")
    record_at(clock, days_ago(20), ctx.stock.use_stock, product.id, 5)
    record_at(clock, days_ago(10), ctx.stock.use_stock, product.id, 5)
    record_at(clock, days_ago(5), ctx.stock.use_stock, product.id, 5)
    return product


class TestWeightedUsage:
    def test_empty_usage_rate_is_zero(self, analytics):
        assert analytics.weighted_daily_usage([]) == 0.0

    def test_matches_decay_formula(self, analytics):
        usage = [_usage(4, days_ago(10), 1), _usage(8, days_ago(2), 2)]
        w1, w2 = math.exp(-10 / 30.0), math.exp(-2 / 30.0)
        expected = ((4 * w1 + 8 * w2) / (w1 + w2)) * (2 / 10)
        assert analytics.weighted_daily_usage(usage) == pytest.approx(expected)

    def test_days_ago_uses_whole_days(self, analytics):
        # 2.9 days counts as 2 days for both the weight and the period
        a = analytics.weighted_daily_usage([_usage(6, days_ago(2.9))])
        b = analytics.weighted_daily_usage([_usage(6, days_ago(2))])
        assert a == pytest.approx(b) == pytest.approx(3.0)

    def test_same_day_usage_uses_one_day_period(self, analytics):
        assert analytics.weighted_daily_usage([_usage(7, NOW)]) == pytest.approx(7.0)

    def test_relevant_usage_filters_type_product_and_window(self, analytics):
        txs = [
            _usage(1, days_ago(1), 1),
            _usage(1, days_ago(1), 2, tx_type=TransactionType.RESTOCK),
            _usage(1, days_ago(1), 3, product_id=2),
            _usage(1, days_ago(60), 4),
            _usage(1, days_ago(59), 5, tx_type=TransactionType.DAMAGE),
        ]
        assert [t.id for t in analytics.relevant_usage(1, txs, 60)] == [1, 5]


class TestTrend:
    def test_needs_four_samples(self, analytics):
        usage = [_usage(q, days_ago(10 - i), i) for i, q in enumerate([1, 2, 100])]
        assert analytics.usage_trend(usage) == 0.0

    def test_relative_change_between_halves(self, analytics):
        usage = [_usage(q, days_ago(10 - i), i) for i, q in enumerate([4, 4, 5, 5])]
        assert analytics.usage_trend(usage) == pytest.approx(0.25)

    def test_clamped_to_half(self, analytics):
        up = [_usage(q, days_ago(10 - i), i) for i, q in enumerate([2, 2, 6, 6])]
        down = [_usage(q, days_ago(10 - i), i) for i, q in enumerate([10, 10, 1, 1])]
        assert analytics.usage_trend(up) == 0.5
        assert analytics.usage_trend(down) == -0.5

    def test_sorted_by_time_not_input_order(self, analytics):
        usage = [
            _usage(6, days_ago(1), 1),
            _usage(6, days_ago(2), 2),
            _usage(4, days_ago(3), 3),
            _usage(4, days_ago(4), 4),
        ]
        assert analytics.usage_trend(usage) == pytest.approx(0.5)

    def test_odd_count_second_half_is_larger(self, analytics):
        usage = [_usage(q, days_ago(10 - i), i) for i, q in enumerate([4, 4, 4, 5, 5])]
        # first half [4, 4], second half [4, 5, 5]
        assert analytics.usage_trend(usage) == pytest.approx((14 / 3 - 4) / 4)

    @pytest.mark.parametrize("quantities", [
        [1, 1, 1, 1], [1, 100, 1, 100], [100, 1, 1, 1, 1, 1], [3, 9, 27, 81, 243],
    ])
    def test_always_within_bounds(self, analytics, quantities):
        usage = [_usage(q, days_ago(30 - i), i) for i, q in enumerate(quantities)]
        assert -0.5 <= analytics.usage_trend(usage) <= 0.5


class TestDaysUntilReorder:
    def test_three_uses_scenario(self, ctx, clock):
        product = _seed_three_uses(ctx, clock)
        assert ctx.registry.get(product.id).current_stock == 35

        weights = [math.exp(-d / 30.0) for d in (20, 10, 5)]
        rate = (sum(5 * w for w in weights) / sum(weights)) * (3 / 20)
        expected = math.ceil((35 - 10) / max(rate, 0.1))

        assert expected == 34
        assert ctx.predict_days_until_reorder(product.id) == expected

    def test_no_usage_returns_sentinel(self, ctx, laptop):
        assert ctx.predict_days_until_reorder(laptop.id) == NO_USAGE_DATA

    def test_usage_older_than_60_days_is_ignored(self, ctx, clock):
        product = record_at(clock, days_ago(61), ctx.stock.add_product, "Old", "Parts", 20, 2, 1.0, "Acme")
        record_at(clock, days_ago(61), ctx.stock.use_stock, product.id, 5)
        assert ctx.predict_days_until_reorder(product.id) == NO_USAGE_DATA

    def test_trend_adjusts_rate(self, ctx, clock):
        product = record_at(clock, days_ago(8), ctx.stock.add_product, "Gear", "Parts", 200, 20, 1.0, "Acme")
        for days, qty in ((8, 2), (6, 2), (4, 6), (2, 6)):
            record_at(clock, days_ago(days), ctx.stock.use_stock, product.id, qty)

        weights = {d: math.exp(-d / 30.0) for d in (8, 6, 4, 2)}
        weighted = (2 * weights[8] + 2 * weights[6] + 6 * weights[4] + 6 * weights[2]) / sum(weights.values())
        rate = weighted * (4 / 8) * 1.5
        expected = math.ceil((184 - 20) / rate)

        assert ctx.predict_days_until_reorder(product.id) == expected

    def test_below_threshold_is_zero_days(self, ctx, laptop):
        ctx.stock.use_stock(laptop.id, 45)
        assert ctx.predict_days_until_reorder(laptop.id) == 0

    def test_rate_floor_of_point_one(self, ctx, clock):
        product = record_at(clock, days_ago(59), ctx.stock.add_product, "Slow", "Parts", 100, 0, 1.0, "Acme")
        record_at(clock, days_ago(59), ctx.stock.use_stock, product.id, 1)
        # rate = 1 * (1 / 59) < 0.1, so the floor applies
        assert ctx.predict_days_until_reorder(product.id) == math.ceil(99 / 0.1)

    def test_unknown_product(self, ctx):
        from smartstock.validation import NotFoundError
        with pytest.raises(NotFoundError):
            ctx.predict_days_until_reorder(404)


class TestSafetyStockAndReorderQuantity:
    def test_default_safety_stock_with_few_samples(self, ctx, laptop):
        ctx.stock.use_stock(laptop.id, 1)
        assert ctx.analytics.safety_stock(ctx.registry.get(laptop.id), ctx.ledger.all()) == 5.0

    def test_weekly_buckets_and_stddev(self, ctx, clock):
        product = record_at(clock, days_ago(21), ctx.stock.add_product, "Gear", "Parts", 40, 5, 1.0, "Acme")
        for days, qty in ((21, 10), (14, 4), (7, 4)):
            record_at(clock, days_ago(days), ctx.stock.use_stock, product.id, qty)

        usage = ctx.analytics.relevant_usage(product.id, ctx.ledger.all(), 90)
        assert ctx.analytics.weekly_usage(usage) == [10.0, 4.0, 4.0, 0.0]

        expected_safety = 1.65 * math.sqrt(12.75)
        current = ctx.registry.get(product.id)
        assert ctx.analytics.safety_stock(current, ctx.ledger.all()) == pytest.approx(expected_safety)

        # 18 used in the last 30 days: ceil(18 * 2.5 + safety - 22)
        assert ctx.suggest_reorder_quantity(product.id) == math.ceil(45 + expected_safety - 22) == 29

    def test_three_uses_scenario_hits_minimum_order(self, ctx, clock):
        product = _seed_three_uses(ctx, clock)
        # flat weekly usage: zero safety stock, target 37.5 vs 35 on hand
        assert ctx.suggest_reorder_quantity(product.id) == 10

    @pytest.mark.parametrize("threshold", [0, 3, 10, 25])
    def test_never_below_minimum_order(self, ctx, threshold):
        product = ctx.stock.add_product("P", "C", 500, threshold, 1.0, "S")
        assert ctx.suggest_reorder_quantity(product.id) >= max(threshold, 10)

    def test_lead_time_usage_uses_configured_days(self, ctx, clock):
        product = _seed_three_uses(ctx, clock)
        ctx.settings.default_lead_time_days = 14
        usage = ctx.analytics.relevant_usage(product.id, ctx.ledger.all(), 30)
        expected = ctx.analytics.weighted_daily_usage(usage) * 14
        assert ctx.lead_time_usage(product.id) == pytest.approx(expected)


class TestCatalogViews:
    def test_products_needing_reorder_ordering(self, ctx, clock):
        low_no_usage = ctx.stock.add_product("A", "X", 5, 10, 1.0, "S")
        ctx.stock.add_product("D", "X", 100, 10, 1.0, "S")

        soon = record_at(clock, days_ago(1), ctx.stock.add_product, "B", "X", 40, 10, 1.0, "S")
        record_at(clock, days_ago(1), ctx.stock.use_stock, soon.id, 15)

        low_with_usage = record_at(clock, days_ago(2), ctx.stock.add_product, "C", "X", 12, 10, 1.0, "S")
        record_at(clock, days_ago(2), ctx.stock.use_stock, low_with_usage.id, 4)

        names = [p.name for p in ctx.products_needing_reorder()]
        assert names == ["C", "A", "B"]

    def test_top_categories_limited_and_sorted(self, ctx):
        values = {"A": 10, "B": 50, "C": 30, "D": 50, "E": 5, "F": 40}
        for category, stock in values.items():
            ctx.stock.add_product(f"{category}-item", category, stock, 0, 1.0, "S")

        top = ctx.analytics.top_categories_by_value(ctx.registry.all())
        assert list(top) == ["B", "D", "F", "C", "A"]
        amounts = list(top.values())
        assert amounts == sorted(amounts, reverse=True)

    def test_recent_activity_sums_by_description(self, ctx, laptop, clock):
        ctx.stock.use_stock(laptop.id, 2)
        ctx.stock.use_stock(laptop.id, 3)
        ctx.stock.sell_stock(laptop.id, 1, 20.0)
        record_at(clock, days_ago(8), ctx.stock.use_stock, laptop.id, 9)

        activity = ctx.analytics.recent_activity(ctx.ledger.all())
        assert activity == {"Restock/Purchase": 50, "Usage/Consumption": 5, "Sale": 1}

    def test_turnover_and_slow_movers(self, ctx, clock):
        idle = ctx.stock.add_product("Idle", "X", 100, 0, 1.0, "S")
        empty = ctx.stock.add_product("Empty", "X", 0, 0, 1.0, "S")
        busy = record_at(clock, days_ago(10), ctx.stock.add_product, "Busy", "X", 100, 0, 1.0, "S")
        record_at(clock, days_ago(10), ctx.stock.use_stock, busy.id, 40)

        products = ctx.registry.all()
        txs = ctx.ledger.all()

        busy_rate = ctx.analytics.weighted_daily_usage(ctx.analytics.relevant_usage(busy.id, txs, 90))
        expected = (365 + 365 + 60 / busy_rate) / 3
        assert ctx.analytics.average_turnover_days(products, txs) == pytest.approx(expected)

        slow = [p.name for p in ctx.analytics.slow_moving_products(products, txs)]
        assert slow == ["Idle"]
        assert empty.name not in slow

    def test_average_turnover_of_empty_catalog(self, analytics):
        assert analytics.average_turnover_days([], []) == 365.0
