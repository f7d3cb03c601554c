# Overview: Reorder alert events raised by stock operations and the observers that receive them.

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..time_utils import to_utc_z


@dataclass(frozen=True)
class ReorderAlert:
    product_id: int
    product_name: str
    current_stock: int
    min_threshold: int
    days_until_reorder: float
    suggested_quantity: int
    raised_at: datetime

    @property
    def has_usage_data(self) -> bool:
        return self.days_until_reorder != float("inf")

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "current_stock": self.current_stock,
            "min_threshold": self.min_threshold,
            "days_until_reorder": int(self.days_until_reorder) if self.has_usage_data else None,
            "suggested_quantity": self.suggested_quantity,
            "raised_at": to_utc_z(self.raised_at),
        }


AlertObserver = Callable[[ReorderAlert], None]


class LoggingAlertObserver:
    """Writes one WARNING line per alert."""

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    def __call__(self, alert: ReorderAlert) -> None:
        days = f"{int(alert.days_until_reorder)}" if alert.has_usage_data else "no data"
        self.logger.warning(
            "REORDER ALERT: %s (ID: %d) - Current: %d, Threshold: %d, Days left: %s, Suggested order: %d",
            alert.product_name,
            alert.product_id,
            alert.current_stock,
            alert.min_threshold,
            days,
            alert.suggested_quantity,
        )


def notify_observers(observers, alert: ReorderAlert, logger: logging.Logger) -> None:
    """Deliver an alert to every observer; a failing observer does not stop the rest."""
    for observer in observers:
        try:
            observer(alert)
        except Exception:
            logger.exception("Reorder alert observer failed for product %s", alert.product_id)
