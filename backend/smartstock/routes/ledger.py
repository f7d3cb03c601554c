# backend/smartstock/routes/ledger.py
"""
Transaction ledger routes (read-only).

History outlives products, so per-product history does not require the
product to still exist.

Date ranges: start_date/end_date accept YYYY-MM-DD (expanded to the whole day)
or full ISO-8601 datetimes; both ends are inclusive.
"""
from datetime import date, datetime, time

from flask import Blueprint, request

from ..extensions import inventory
from ..models import parse_transaction_type
from ..time_utils import parse_iso_datetime

ledger_bp = Blueprint("ledger", __name__, url_prefix="/api/inventory")

# timedelta overflows far beyond this
MAX_RECENT_DAYS = 36500


def _parse_bound(raw: str | None, *, end: bool) -> datetime | None:
    if raw is None or not raw.strip():
        return None
    raw = raw.strip()
    if len(raw) == 10:
        day = date.fromisoformat(raw)
        return datetime.combine(day, time(23, 59, 59) if end else time(0, 0, 0))
    return parse_iso_datetime(raw)


def _tx_list(transactions) -> dict:
    return {"items": [t.to_dict() for t in transactions], "count": len(transactions)}


@ledger_bp.get("/transactions")
def list_transactions():
    transactions = inventory.context.ledger.all()

    tx_type = request.args.get("type")
    if tx_type:
        try:
            wanted = parse_transaction_type(tx_type)
        except ValueError as e:
            return {"error": str(e)}, 400
        transactions = [t for t in transactions if t.type is wanted]

    return _tx_list(transactions)


@ledger_bp.get("/transactions/recent")
def recent_transactions():
    days = request.args.get("days", default=7, type=int)
    if days is None or days < 0:
        return {"error": "days must be a non-negative integer"}, 400
    if days > MAX_RECENT_DAYS:
        return {"error": f"days must be at most {MAX_RECENT_DAYS}"}, 400
    return _tx_list(inventory.context.ledger.recent(days))


@ledger_bp.get("/products/<int:product_id>/transactions")
def product_transactions(product_id: int):
    return _tx_list(inventory.context.ledger.history(product_id))


@ledger_bp.get("/products/<int:product_id>/transactions/range")
def product_transactions_in_range(product_id: int):
    try:
        start = _parse_bound(request.args.get("start_date"), end=False)
        end = _parse_bound(request.args.get("end_date"), end=True)
    except ValueError:
        return {"error": "start_date and end_date must be YYYY-MM-DD or ISO-8601 datetimes"}, 400

    if start is None or end is None:
        return {"error": "start_date and end_date are required"}, 400
    if start > end:
        return {"error": "start_date must not be after end_date"}, 400

    return _tx_list(inventory.context.ledger.history(product_id, start, end))
