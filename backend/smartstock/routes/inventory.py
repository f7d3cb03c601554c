# backend/smartstock/routes/inventory.py
"""
Stock operation routes.

Insufficient stock is not an input error: those requests answer 409 with
{"success": false} and leave stock and ledger untouched.
"""
from flask import Blueprint, current_app, jsonify, request

from ..extensions import inventory
from ..validation import (
    FLOAT,
    INT,
    STR,
    InventoryError,
    NotFoundError,
    PayloadPolicy,
    ValidationError,
    validate_payload,
)

inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")

STOCK_OPERATION_POLICY = PayloadPolicy(
    fields={"quantity": INT, "notes": STR, "performed_by": STR},
    required={"quantity"},
)

SALE_POLICY = PayloadPolicy(
    fields={"quantity": INT, "sale_price": FLOAT, "notes": STR, "performed_by": STR},
    required={"quantity", "sale_price"},
)

RESTOCK_POLICY = PayloadPolicy(
    fields={"quantity": INT, "total_cost": FLOAT, "notes": STR, "performed_by": STR},
    required={"quantity"},
)

ADJUST_POLICY = PayloadPolicy(
    fields={"new_quantity": INT, "reason": STR, "performed_by": STR},
    required={"new_quantity"},
)

RETURN_POLICY = PayloadPolicy(
    fields={"quantity": INT, "refund_amount": FLOAT, "notes": STR, "performed_by": STR},
    required={"quantity"},
)

TRANSFER_POLICY = PayloadPolicy(
    fields={"quantity": INT, "destination": STR, "notes": STR, "performed_by": STR},
    required={"quantity", "destination"},
)

BULK_RESTOCK_ITEM_POLICY = PayloadPolicy(
    fields={"product_id": INT, "quantity": INT, "total_cost": FLOAT},
    required={"product_id", "quantity"},
)


def _run_stock_operation(product_id: int, policy: PayloadPolicy, operation, action: str, refusal: str):
    """Validate the body, run the operation, map the outcome to a response."""
    payload = request.get_json(silent=True) or {}
    ctx = inventory.context

    try:
        patch = validate_payload(payload=payload, policy=policy)
        success = operation(ctx.stock, patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except Exception:
        current_app.logger.exception("Failed to %s for product %s", action, product_id)
        return {"error": "Internal server error"}, 500

    if not success:
        return {"success": False, "error": refusal}, 409
    return {"success": True, "product": ctx.registry.get(product_id).to_dict()}


@inventory_bp.post("/products/<int:product_id>/use")
def use_stock_route(product_id: int):
    return _run_stock_operation(
        product_id,
        STOCK_OPERATION_POLICY,
        lambda stock, p: stock.use_stock(product_id, p["quantity"], p.get("notes"), p.get("performed_by")),
        "record usage",
        "Insufficient stock available",
    )


@inventory_bp.post("/products/<int:product_id>/sell")
def sell_stock_route(product_id: int):
    return _run_stock_operation(
        product_id,
        SALE_POLICY,
        lambda stock, p: stock.sell_stock(
            product_id, p["quantity"], p["sale_price"], p.get("notes"), p.get("performed_by")
        ),
        "record sale",
        "Insufficient stock available",
    )


@inventory_bp.post("/products/<int:product_id>/restock")
def restock_route(product_id: int):
    return _run_stock_operation(
        product_id,
        RESTOCK_POLICY,
        lambda stock, p: stock.restock_product(
            product_id, p["quantity"], p.get("total_cost", 0.0), p.get("notes"), p.get("performed_by")
        ),
        "restock",
        "Failed to restock product",
    )


@inventory_bp.post("/products/<int:product_id>/adjust")
def adjust_route(product_id: int):
    return _run_stock_operation(
        product_id,
        ADJUST_POLICY,
        lambda stock, p: stock.adjust_stock(
            product_id, p["new_quantity"], p.get("reason"), p.get("performed_by")
        ),
        "adjust stock",
        "Failed to adjust stock",
    )


@inventory_bp.post("/products/<int:product_id>/return")
def return_route(product_id: int):
    return _run_stock_operation(
        product_id,
        RETURN_POLICY,
        lambda stock, p: stock.return_stock(
            product_id, p["quantity"], p.get("refund_amount", 0.0), p.get("notes"), p.get("performed_by")
        ),
        "record return",
        "Failed to record return",
    )


@inventory_bp.post("/products/<int:product_id>/damage")
def damage_route(product_id: int):
    return _run_stock_operation(
        product_id,
        STOCK_OPERATION_POLICY,
        lambda stock, p: stock.record_damage(product_id, p["quantity"], p.get("notes"), p.get("performed_by")),
        "record damage",
        "Insufficient stock available",
    )


@inventory_bp.post("/products/<int:product_id>/transfer")
def transfer_route(product_id: int):
    return _run_stock_operation(
        product_id,
        TRANSFER_POLICY,
        lambda stock, p: stock.transfer_stock(
            product_id, p["quantity"], p["destination"], p.get("notes"), p.get("performed_by")
        ),
        "transfer stock",
        "Insufficient stock available",
    )


@inventory_bp.get("/products/<int:product_id>/reconcile")
def reconcile_route(product_id: int):
    """Compare the live stock level with the level rebuilt from the ledger."""
    try:
        current, replayed = inventory.context.stock.reconcile(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404
    return {
        "product_id": product_id,
        "current_stock": current,
        "ledger_stock": replayed,
        "consistent": current == replayed,
    }


@inventory_bp.post("/bulk/restock")
def bulk_restock_route():
    """
    Restock several products; a failing item is counted and skipped.

    Body: [{"product_id": 1, "quantity": 10, "total_cost": 99.0}, ...]
    """
    items = request.get_json(silent=True)
    if not isinstance(items, list):
        return {"error": "Expected a JSON list of restock items"}, 400

    stock = inventory.context.stock
    successful = 0
    failed = 0
    for item in items:
        try:
            patch = validate_payload(payload=item, policy=BULK_RESTOCK_ITEM_POLICY)
            ok = stock.restock_product(
                patch["product_id"],
                patch["quantity"],
                patch.get("total_cost", 0.0),
                "Bulk restock operation",
                "Bulk API",
            )
        except InventoryError as e:
            current_app.logger.info("Bulk restock item skipped: %s", e)
            ok = False
        if ok:
            successful += 1
        else:
            failed += 1

    return jsonify({"successful": successful, "failed": failed, "total": len(items)})
