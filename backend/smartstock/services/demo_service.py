# Overview: Demo catalog seeding and the scripted operations shown by the CLI demo.

from __future__ import annotations

DEMO_PRODUCTS = [
    # name, category, initial stock, min threshold, unit cost, supplier
    ("Laptop", "Electronics", 50, 10, 899.99, "TechCorp"),
    ("Office Chair", "Furniture", 25, 5, 149.99, "FurniturePlus"),
    ("Printer Paper", "Office Supplies", 100, 20, 4.99, "OfficeMax"),
    ("USB Cable", "Electronics", 200, 50, 9.99, "TechCorp"),
    ("Desk Lamp", "Furniture", 15, 3, 39.99, "LightingInc"),
]


def seed_demo_data(ctx) -> list:
    """
    Load the demo catalog plus a few usage and sale entries for analytics.

    Returns the created products. Safe only on an empty inventory: ids in the
    scripted operations refer to creation order.
    """
    products = [ctx.stock.add_product(*row) for row in DEMO_PRODUCTS]
    laptop, chair, paper, cable, lamp = (p.id for p in products)

    ctx.stock.use_stock(laptop, 5, "Department allocation", "John Doe")
    ctx.stock.sell_stock(chair, 3, 179.99, "Customer purchase", "Jane Smith")
    ctx.stock.use_stock(paper, 25, "Office restocking", "Admin")
    ctx.stock.sell_stock(cable, 15, 12.99, "Bulk customer order", "Sales Team")
    ctx.stock.use_stock(lamp, 2, "Meeting room setup", "Facilities")
    return products


def run_demo_operations(ctx) -> list[tuple[str, bool]]:
    """Scripted use / sell / restock against the seeded catalog."""
    by_name = {p.name: p.id for p in ctx.registry.all()}
    results = []

    paper = by_name.get("Printer Paper")
    if paper is not None:
        results.append(("Using 10 units of Printer Paper", ctx.stock.use_stock(paper, 10, "Office consumption", "Demo System")))

    laptop = by_name.get("Laptop")
    if laptop is not None:
        results.append(("Selling 2 Laptops", ctx.stock.sell_stock(laptop, 2, 1899.98, "Customer sale", "Demo System")))

    cable = by_name.get("USB Cable")
    if cable is not None:
        results.append(("Restocking 20 USB Cables", ctx.stock.restock_product(cable, 20, 160.0, "Supplier delivery", "Demo System")))

    return results
