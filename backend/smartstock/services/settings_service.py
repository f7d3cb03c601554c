# Overview: Runtime-tunable inventory knobs (lead time, service level) with clamping.

from __future__ import annotations

import threading

DEFAULT_LEAD_TIME_DAYS = 7
DEFAULT_SERVICE_LEVEL = 0.95

MIN_LEAD_TIME_DAYS = 1
MIN_SERVICE_LEVEL = 0.5
MAX_SERVICE_LEVEL = 0.99


def clamp_lead_time_days(days: int) -> int:
    return max(MIN_LEAD_TIME_DAYS, int(days))


def clamp_service_level(level: float) -> float:
    return max(MIN_SERVICE_LEVEL, min(MAX_SERVICE_LEVEL, float(level)))


class InventorySettings:
    """
    Process-wide defaults read by the analytics layer.

    Setters clamp instead of rejecting: lead time is at least one day and the
    service level stays within [0.5, 0.99].
    """

    def __init__(
        self,
        lead_time_days: int = DEFAULT_LEAD_TIME_DAYS,
        service_level: float = DEFAULT_SERVICE_LEVEL,
    ):
        self._lock = threading.Lock()
        self._lead_time_days = clamp_lead_time_days(lead_time_days)
        self._service_level = clamp_service_level(service_level)

    @classmethod
    def from_config(cls, config) -> "InventorySettings":
        return cls(
            lead_time_days=config.get("SMARTSTOCK_LEAD_TIME_DAYS", DEFAULT_LEAD_TIME_DAYS),
            service_level=config.get("SMARTSTOCK_SERVICE_LEVEL", DEFAULT_SERVICE_LEVEL),
        )

    @property
    def default_lead_time_days(self) -> int:
        with self._lock:
            return self._lead_time_days

    @default_lead_time_days.setter
    def default_lead_time_days(self, days: int) -> None:
        with self._lock:
            self._lead_time_days = clamp_lead_time_days(days)

    @property
    def default_service_level(self) -> float:
        with self._lock:
            return self._service_level

    @default_service_level.setter
    def default_service_level(self, level: float) -> None:
        with self._lock:
            self._service_level = clamp_service_level(level)

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "default_lead_time_days": self._lead_time_days,
                "default_service_level": self._service_level,
            }
