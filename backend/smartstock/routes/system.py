# backend/smartstock/routes/system.py
"""
System health and configuration endpoints.
"""

import time

from flask import Blueprint, current_app, request

from ..extensions import inventory
from ..time_utils import to_utc_z
from ..validation import FLOAT, INT, PayloadPolicy, ValidationError, validate_payload

system_bp = Blueprint("system", __name__)

_STARTED_AT = time.time()

CONFIG_POLICY = PayloadPolicy(
    fields={"lead_time_days": INT, "service_level": FLOAT},
)


@system_bp.get("/health")
def health():
    """Liveness plus a quick look at the in-memory inventory."""
    ctx = inventory.context
    return {
        "status": "healthy",
        "time": to_utc_z(ctx.clock.now()),
        "uptime_seconds": round(time.time() - _STARTED_AT, 2),
        "details": {
            "products": len(ctx.registry),
            "transactions": len(ctx.ledger),
        },
    }


@system_bp.get("/api/inventory/config")
def get_config():
    return inventory.context.settings.to_dict()


@system_bp.post("/api/inventory/config")
def update_config():
    """
    Update analytics defaults. Out-of-range values are clamped, not rejected:
    lead time to >= 1 day, service level to [0.5, 0.99].
    """
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(payload=payload, policy=CONFIG_POLICY)
    except ValidationError as e:
        return {"error": str(e)}, 400

    settings = inventory.context.settings
    if "lead_time_days" in patch:
        settings.default_lead_time_days = patch["lead_time_days"]
    if "service_level" in patch:
        settings.default_service_level = patch["service_level"]

    current_app.logger.info("Inventory configuration updated: %s", settings.to_dict())
    return settings.to_dict()
