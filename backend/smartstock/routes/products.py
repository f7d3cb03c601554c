# Overview: Flask API routes for product operations; parses input and returns JSON responses.

# backend/smartstock/routes/products.py
"""
Product management routes.

Products are created, updated and deleted through the stock operations so the
ledger records every change. Listing and search read registry snapshots.
"""
from dataclasses import replace

from flask import Blueprint, request

from ..extensions import inventory
from ..validation import (
    FLOAT,
    INT,
    STR,
    ConflictError,
    NotFoundError,
    PayloadPolicy,
    ValidationError,
    validate_payload,
)

products_bp = Blueprint("products", __name__, url_prefix="/api/inventory")

PRODUCT_CREATE_POLICY = PayloadPolicy(
    fields={
        "name": STR,
        "category": STR,
        "initial_stock": INT,
        "min_threshold": INT,
        "unit_cost": FLOAT,
        "supplier": STR,
    },
    required={"name", "category", "supplier"},
)

PRODUCT_UPDATE_POLICY = PayloadPolicy(
    fields={"name": STR, "category": STR, "min_threshold": INT, "supplier": STR},
)


def _product_list(products) -> dict:
    return {"items": [p.to_dict() for p in products], "count": len(products)}


@products_bp.get("/products")
def list_products():
    """
    List products.

    Query params:
    - category: str (optional) - exact category match, case-insensitive
    - query: str (optional) - name substring, case-insensitive
    """
    registry = inventory.context.registry
    category = request.args.get("category")
    query = request.args.get("query")

    products = registry.all()
    if category:
        products = [p for p in products if p.category.lower() == category.lower()]
    if query:
        products = [p for p in products if query.lower() in p.name.lower()]
    return _product_list(products)


@products_bp.get("/products/<int:product_id>")
def get_product(product_id: int):
    try:
        return inventory.context.registry.get(product_id).to_dict()
    except NotFoundError as e:
        return {"error": str(e)}, 404


@products_bp.post("/products")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_CREATE_POLICY)
        product = inventory.context.stock.add_product(
            patch["name"],
            patch["category"],
            patch.get("initial_stock", 0),
            patch.get("min_threshold", 0),
            patch.get("unit_cost", 0.0),
            patch["supplier"],
        )
    except ValidationError as e:
        return {"error": str(e)}, 400

    return product.to_dict(), 201


@products_bp.put("/products/<int:product_id>")
def update_product_route(product_id: int):
    payload = request.get_json(silent=True) or {}
    ctx = inventory.context

    try:
        patch = validate_payload(payload=payload, policy=PRODUCT_UPDATE_POLICY)
        current = ctx.registry.get(product_id)
        updated = ctx.stock.update_product(replace(current, **patch))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404

    return updated.to_dict()


@products_bp.delete("/products/<int:product_id>")
def delete_product_route(product_id: int):
    try:
        inventory.context.stock.delete_product(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409
    return {"deleted": product_id}


@products_bp.get("/products/category/<category>")
def products_by_category(category: str):
    return _product_list(inventory.context.registry.by_category(category))


@products_bp.get("/products/search")
def search_products():
    query = request.args.get("query", "")
    if not query.strip():
        return {"error": "query is required"}, 400
    return _product_list(inventory.context.registry.search_by_name(query))


@products_bp.get("/products/low-stock")
def low_stock_products():
    return _product_list(inventory.context.registry.low_stock())


@products_bp.get("/products/out-of-stock")
def out_of_stock_products():
    return _product_list(inventory.context.registry.out_of_stock())


@products_bp.get("/products/reorder-needed")
def products_needing_reorder():
    return _product_list(inventory.context.products_needing_reorder())


@products_bp.get("/categories")
def list_categories():
    return {"items": inventory.context.registry.categories()}


@products_bp.get("/suppliers")
def list_suppliers():
    return {"items": inventory.context.registry.suppliers()}
