from flask import Blueprint

from ..extensions import inventory
from ..services.analytics_service import NO_USAGE_DATA
from ..validation import NotFoundError

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/inventory")

URGENT_WITHIN_DAYS = 7


@analytics_bp.get("/analytics/report")
def inventory_report():
    return inventory.context.generate_report().to_dict()


@analytics_bp.get("/analytics/statistics")
def inventory_statistics():
    return inventory.context.statistics().to_dict()


@analytics_bp.get("/analytics/dashboard")
def dashboard():
    return inventory.context.dashboard().to_dict()


@analytics_bp.get("/products/<int:product_id>/predict-reorder")
def predict_reorder(product_id: int):
    """
    Reorder prediction for one product.

    days_until_reorder is null when the product has no usage in the last 60 days.
    """
    ctx = inventory.context
    try:
        days = ctx.predict_days_until_reorder(product_id)
        suggested = ctx.suggest_reorder_quantity(product_id)
        lead_time_usage = ctx.lead_time_usage(product_id)
    except NotFoundError as e:
        return {"error": str(e)}, 404

    has_data = days != NO_USAGE_DATA
    return {
        "product_id": product_id,
        "days_until_reorder": days if has_data else None,
        "has_usage_data": has_data,
        "suggested_quantity": suggested,
        "lead_time_days": ctx.settings.default_lead_time_days,
        "lead_time_usage": lead_time_usage,
        "urgent": has_data and days <= URGENT_WITHIN_DAYS,
    }
