import pytest

from smartstock.services.reporting_service import render_text_report
from tests.conftest import NOW, days_ago, record_at


@pytest.fixture
def catalog(ctx, clock):
    """Laptop (busy), Chair (low), Cable (out of stock), Paper (idle)."""
    laptop = record_at(clock, days_ago(10), ctx.stock.add_product, "Laptop", "Electronics", 20, 5, 800.0, "TechCorp")
    chair = ctx.stock.add_product("Chair", "Furniture", 3, 5, 150.0, "OfficeMax")
    cable = ctx.stock.add_product("Cable", "Electronics", 0, 2, 5.0, "CableCo")
    paper = ctx.stock.add_product("Paper", "Supplies", 100, 10, 2.0, "PaperCo")

    record_at(clock, days_ago(10), ctx.stock.use_stock, laptop.id, 4)
    ctx.stock.sell_stock(laptop.id, 1, 1000.0)
    return laptop, chair, cable, paper


class TestReport:
    def test_counts_and_value(self, ctx, catalog):
        report = ctx.generate_report()

        assert report.report_date == NOW
        assert report.total_products == 4
        assert report.total_value == pytest.approx(15 * 800 + 3 * 150 + 0 + 100 * 2)
        assert report.low_stock_count == 2
        assert report.out_of_stock_count == 1

    def test_sections(self, ctx, catalog):
        laptop, chair, cable, paper = catalog
        report = ctx.generate_report()

        needing = [p.id for p in report.products_needing_reorder]
        # both low with no usage: registry order breaks the tie
        assert needing == [chair.id, cable.id]
        assert paper.id not in needing

        assert list(report.top_categories) == ["Electronics", "Furniture", "Supplies"]
        assert report.recent_activity == {"Restock/Purchase": 103, "Sale": 1}
        assert paper.id in [p.id for p in report.slow_moving_products]

    def test_to_dict_shapes(self, ctx, catalog):
        data = ctx.generate_report().to_dict()

        assert data["report_date"] == "2024-06-01T12:00:00Z"
        assert data["top_categories"][0] == {"category": "Electronics", "value": pytest.approx(12000.0)}
        assert all("stock_status" in p for p in data["products_needing_reorder"])

    def test_empty_inventory(self, ctx):
        report = ctx.generate_report()
        assert report.total_products == 0
        assert report.total_value == 0
        assert report.products_needing_reorder == []
        assert report.top_categories == {}
        assert report.average_turnover_days == 365.0


class TestStatistics:
    def test_statistics(self, ctx, catalog):
        stats = ctx.statistics()

        assert stats.total_products == 4
        assert stats.total_stock_units == 15 + 3 + 0 + 100
        assert stats.low_stock_count == 2
        assert stats.out_of_stock_count == 1
        assert stats.categories_count == 3
        # Laptop's restock and use happened 10 days ago; Cable started empty
        assert stats.recent_transactions_count == 3

    def test_dashboard_bundle(self, ctx, catalog):
        laptop, chair, cable, paper = catalog
        data = ctx.dashboard().to_dict()

        assert data["statistics"]["total_products"] == 4
        assert [p["id"] for p in data["low_stock_products"]] == [cable.id, chair.id]
        assert {p["id"] for p in data["need_reorder_products"]} >= {cable.id, chair.id}
        assert len(data["recent_transactions"]) == 3


class TestTextReport:
    def test_sections_present(self, ctx, catalog):
        text = render_text_report(ctx)

        for heading in ("INVENTORY OVERVIEW", "PREDICTIVE ANALYTICS", "LOW STOCK ALERTS", "COMPREHENSIVE REPORT"):
            assert f"=== {heading} ===" in text
        assert "Total Products: 4" in text
        assert "Chair - Stock: 3" in text
        assert "No data" in text
        assert "Report Date: 2024-06-01" in text

    def test_no_low_stock(self, ctx):
        ctx.stock.add_product("Desk", "Furniture", 50, 5, 100.0, "OfficeMax")
        assert "No low stock products" in render_text_report(ctx)
