# backend/smartstock/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Inventory analytics defaults (clamped by InventorySettings)
    SMARTSTOCK_LEAD_TIME_DAYS = int(os.environ.get("SMARTSTOCK_LEAD_TIME_DAYS", "7"))
    SMARTSTOCK_SERVICE_LEVEL = float(os.environ.get("SMARTSTOCK_SERVICE_LEVEL", "0.95"))

    # Load the demo catalog on startup (state is in-memory only)
    SMARTSTOCK_SEED_DEMO_DATA = _env_flag("SMARTSTOCK_SEED_DEMO_DATA")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
